"""Saved configuration routes — GET/PUT/DELETE /api/configurations.

A configuration is a flat snapshot of every slider plus the ``showLabels``
and ``showHelp`` flags, stored under a name.  The UI uses the single name
``intubationConfig``; any other name works the same way.

Uses dependency injection for the StorageBackend so that tests can swap in a
temporary directory.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from airway.models import ConfigurationSummary, SavedConfiguration
from airway.storage import StorageBackend, create_storage_backend

router = APIRouter(prefix="/api/configurations", tags=["configurations"])

# ---------------------------------------------------------------------------
# Dependency: default storage backend
# ---------------------------------------------------------------------------

_default_storage: StorageBackend | None = None


def _get_storage() -> StorageBackend:
    """FastAPI dependency returning the active StorageBackend.

    Created on first use from ``AIRWAY_MODE`` / ``AIRWAY_DATA_DIR``; tests and
    main.py may inject another backend with ``set_storage()``.
    """
    global _default_storage  # noqa: PLW0603
    if _default_storage is None:
        _default_storage = create_storage_backend()
    return _default_storage


def set_storage(storage: StorageBackend | None) -> None:
    """Override the default storage backend (used by tests and main.py)."""
    global _default_storage  # noqa: PLW0603
    _default_storage = storage


def _not_found(name: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"No saved configuration found: {name}")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("", response_model=list[ConfigurationSummary], response_model_by_alias=True)
async def list_configurations(
    storage: StorageBackend = Depends(_get_storage),
) -> list[ConfigurationSummary]:
    """Return summaries of all saved configurations, newest first."""
    return [ConfigurationSummary(**d) for d in storage.list_items()]


@router.put("/{name}")
async def save_configuration(
    name: str,
    config: SavedConfiguration,
    storage: StorageBackend = Depends(_get_storage),
) -> dict:
    """Save (or overwrite) the configuration stored under *name*."""
    try:
        storage.save(name, config.model_dump(by_alias=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"name": name}


@router.get("/{name}", response_model=SavedConfiguration, response_model_by_alias=True)
async def load_configuration(
    name: str,
    storage: StorageBackend = Depends(_get_storage),
) -> SavedConfiguration:
    """Load a saved configuration.  Returns 404 if nothing is stored."""
    try:
        data = storage.load(name)
    except FileNotFoundError:
        raise _not_found(name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return SavedConfiguration(**data)


@router.delete("/{name}", status_code=204)
async def delete_configuration(
    name: str,
    storage: StorageBackend = Depends(_get_storage),
) -> Response:
    """Delete a saved configuration.  Returns 404 if not found."""
    try:
        storage.delete(name)
    except FileNotFoundError:
        raise _not_found(name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return Response(status_code=204)
