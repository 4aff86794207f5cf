"""Info route — exposes runtime configuration to the frontend.

GET /api/info returns the current AIRWAY_MODE so the UI can adapt its
behaviour (e.g. warn that saved configurations vanish on restart in cloud
mode), plus the built-in preset names.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from airway.presets import KEYBOARD_PRESETS, preset_names
from airway.storage import get_airway_mode

router = APIRouter(prefix="/api", tags=["info"])


@router.get("/info")
async def get_info(request: Request) -> dict:
    """Return runtime information about the current deployment.

    Response fields
    ---------------
    mode : str
        ``"local"`` — file-backed storage (default).
        ``"cloud"`` — in-memory storage; nothing survives a restart.
    version : str
        Application version string sourced from the FastAPI app metadata.
    storage : str
        Human-readable description of the active storage backend.
    presets : list[str]
        Built-in preset names.
    keyboardPresets : list[str]
        Presets bound to the number keys, in key order.
    """
    mode = get_airway_mode()
    storage_desc = (
        "LocalStorage (file-based)" if mode == "local" else "MemoryStorage (in-memory, ephemeral)"
    )
    return {
        "mode": mode,
        "version": request.app.version,
        "storage": storage_desc,
        "presets": preset_names(),
        "keyboardPresets": list(KEYBOARD_PRESETS),
    }
