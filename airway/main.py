"""FastAPI application — entry point for the airway geometry service.

Lifespan configures storage, registers route modules, serves the health
endpoint, and mounts static files for the canvas frontend.

AIRWAY_MODE environment variable controls storage behaviour:
  local (default) — LocalStorage writes JSON files to AIRWAY_DATA_DIR
  cloud           — MemoryStorage keeps configurations in-memory
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from airway.routes.configurations import (
    router as configurations_router,
    set_storage as set_config_storage,
)
from airway.routes.info import router as info_router
from airway.routes.presets import router as presets_router, set_storage as set_preset_storage
from airway.routes.solve import router as solve_router
from airway.routes.websocket import router as websocket_router
from airway.storage import create_storage_backend, data_dir, get_airway_mode, presets_dir

logger = logging.getLogger("airway")

VERSION = "0.1.0"


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
        logger.info("Storage directory ready: %s", path)
    except OSError:
        logger.warning("Cannot create %s — saving will fail until it exists", path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup tasks:
    1. Ensure storage directories exist (local mode only)
    2. Configure configuration and preset storage based on AIRWAY_MODE
    """
    mode = get_airway_mode()
    if mode == "local":
        _ensure_dir(data_dir())
        _ensure_dir(presets_dir())
        logger.info("AIRWAY_MODE=local — configurations at %s", data_dir())
    else:
        logger.info("AIRWAY_MODE=cloud — using MemoryStorage (ephemeral)")

    set_config_storage(create_storage_backend())
    set_preset_storage(create_storage_backend(presets_dir()))
    yield


app = FastAPI(title="airway", version=VERSION, lifespan=lifespan)

# ---------------------------------------------------------------------------
# CORS middleware for development (Vite dev server at localhost:5173)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# API route registration
# ---------------------------------------------------------------------------
app.include_router(solve_router)
app.include_router(configurations_router)
app.include_router(presets_router)
app.include_router(info_router)
app.include_router(websocket_router)


# ---------------------------------------------------------------------------
# Health check (before static mount so it is not shadowed)
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": VERSION, "mode": get_airway_mode()}


# ---------------------------------------------------------------------------
# Static files mount MUST be last: catches all unmatched routes.
# ---------------------------------------------------------------------------
_static_dir = Path("static")
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
