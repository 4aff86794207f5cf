"""Preset routes — built-in presets plus custom presets CRUD.

GET    /api/presets         — built-ins first, then custom presets newest first
GET    /api/presets/{id}    — complete slider set (built-in name or custom id)
POST   /api/presets         — save the current sliders as a custom preset
DELETE /api/presets/{id}    — delete a custom preset (built-ins are read-only)

Custom presets use their own StorageBackend instance, injected by main.py;
same dependency injection pattern as configurations.py.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Response

from airway.models import PresetSummary, SavePresetRequest, SliderConfig
from airway.presets import PRESETS, PresetNotFoundError, load_preset, preset_names
from airway.storage import StorageBackend, create_storage_backend, presets_dir

router = APIRouter(prefix="/api/presets", tags=["presets"])

# ---------------------------------------------------------------------------
# Dependency: preset storage backend
# ---------------------------------------------------------------------------

_default_storage: StorageBackend | None = None


def _get_storage() -> StorageBackend:
    """FastAPI dependency returning the custom preset storage backend."""
    global _default_storage  # noqa: PLW0603
    if _default_storage is None:
        _default_storage = create_storage_backend(presets_dir())
    return _default_storage


def set_storage(storage: StorageBackend | None) -> None:
    """Override the default preset storage (called by main.py and tests)."""
    global _default_storage  # noqa: PLW0603
    _default_storage = storage


def _not_found(preset_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Preset not found: {preset_id}")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("", response_model=list[PresetSummary], response_model_by_alias=True)
async def list_presets(
    storage: StorageBackend = Depends(_get_storage),
) -> list[PresetSummary]:
    """Return built-in presets followed by custom presets."""
    builtins = [
        PresetSummary(id=name, name=name.capitalize(), builtin=True)
        for name in preset_names()
    ]
    custom = [
        PresetSummary(id=d["id"], name=d.get("name", "Untitled Preset"), created_at=d["modified_at"])
        for d in storage.list_items()
    ]
    return builtins + custom


@router.get("/{preset_id}", response_model=SliderConfig, response_model_by_alias=True)
async def get_preset(
    preset_id: str,
    storage: StorageBackend = Depends(_get_storage),
) -> SliderConfig:
    """Return the complete slider set of a preset.  404 if unknown."""
    try:
        return load_preset(preset_id)
    except PresetNotFoundError:
        pass
    try:
        data = storage.load(preset_id)
    except (FileNotFoundError, ValueError):
        raise _not_found(preset_id)
    return SliderConfig(**data)


@router.post("", status_code=201)
async def save_preset(
    request: SavePresetRequest,
    storage: StorageBackend = Depends(_get_storage),
) -> dict:
    """Save slider values as a named custom preset; returns its id and name."""
    preset_id = str(uuid4())
    data = request.sliders.model_dump(by_alias=True)
    data["name"] = request.name
    data["created_at"] = datetime.now(tz=timezone.utc).isoformat()
    storage.save(preset_id, data)
    return {"id": preset_id, "name": request.name}


@router.delete("/{preset_id}", status_code=204)
async def delete_preset(
    preset_id: str,
    storage: StorageBackend = Depends(_get_storage),
) -> Response:
    """Delete a custom preset.  403 for built-ins, 404 if not found."""
    if preset_id in PRESETS:
        raise HTTPException(status_code=403, detail=f"Built-in preset is read-only: {preset_id}")
    try:
        storage.delete(preset_id)
    except (FileNotFoundError, ValueError):
        raise _not_found(preset_id)
    return Response(status_code=204)
