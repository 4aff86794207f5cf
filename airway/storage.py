"""Storage backend — Protocol + LocalStorage + MemoryStorage implementations.

Stores opaque key → JSON blob snapshots: saved slider configurations and
custom presets.

LocalStorage reads/writes ``.airway`` JSON files in a directory.
MemoryStorage keeps everything in an in-memory dict (stateless deployments).

The StorageBackend Protocol exists so that implementations can be swapped
without modifying calling code.  Use ``create_storage_backend()`` to obtain
the correct implementation for the current ``AIRWAY_MODE`` environment
variable.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Protocol

logger = logging.getLogger("airway.storage")

DEFAULT_DATA_DIR = "/data/configurations"


# ---------------------------------------------------------------------------
# AIRWAY_MODE helpers
# ---------------------------------------------------------------------------

AirwayMode = Literal["local", "cloud"]
_VALID_MODES: frozenset[str] = frozenset({"local", "cloud"})


def get_airway_mode() -> AirwayMode:
    """Return the current AIRWAY_MODE value, defaulting to ``'local'``.

    Unrecognised values fall back to ``'local'`` with a warning.
    """
    raw = os.environ.get("AIRWAY_MODE", "local").strip().lower()
    if raw not in _VALID_MODES:
        logger.warning(
            "Unknown AIRWAY_MODE=%r — falling back to 'local'. Valid values are: %s",
            raw,
            ", ".join(sorted(_VALID_MODES)),
        )
        return "local"
    return raw  # type: ignore[return-value]


def data_dir() -> Path:
    return Path(os.environ.get("AIRWAY_DATA_DIR", DEFAULT_DATA_DIR))


def presets_dir() -> Path:
    """Custom presets live next to the configurations directory."""
    return data_dir().parent / "presets"


def create_storage_backend(base_path: Path | None = None) -> "LocalStorage | MemoryStorage":
    """Factory: return the appropriate StorageBackend for the current AIRWAY_MODE.

    - ``local``  → :class:`LocalStorage` at *base_path* (default ``AIRWAY_DATA_DIR``)
    - ``cloud``  → :class:`MemoryStorage`
    """
    if get_airway_mode() == "cloud":
        return MemoryStorage()
    return LocalStorage(base_path=str(base_path or data_dir()))


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class StorageBackend(Protocol):
    """Protocol defining the storage interface."""

    def save(self, item_id: str, data: dict) -> None: ...
    def load(self, item_id: str) -> dict: ...
    def list_items(self) -> list[dict]: ...
    def delete(self, item_id: str) -> None: ...


# ---------------------------------------------------------------------------
# LocalStorage: file-based
# ---------------------------------------------------------------------------


class LocalStorage:
    """Reads/writes .airway JSON files in a directory."""

    suffix = ".airway"

    def __init__(self, base_path: str = DEFAULT_DATA_DIR) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _safe_id(self, item_id: str) -> str:
        """Sanitize item_id to prevent path traversal attacks."""
        safe = Path(item_id).name
        if not safe or safe in (".", ".."):
            raise ValueError(f"Invalid id: {item_id!r}")
        return safe

    def _path(self, item_id: str) -> Path:
        return self.base_path / f"{self._safe_id(item_id)}{self.suffix}"

    def save(self, item_id: str, data: dict) -> None:
        """Write *data* as pretty-printed JSON using an atomic write.

        Writes to a sibling temp file first, then ``os.replace()`` swaps it
        into place so a crash mid-write never leaves a truncated file.
        """
        target = self._path(item_id)
        data_str = json.dumps(data, indent=2)
        tmp_fd, tmp_path_str = tempfile.mkstemp(
            dir=target.parent, prefix=".tmp_", suffix=".json"
        )
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                f.write(data_str)
            os.replace(tmp_path_str, target)
        except Exception:
            try:
                os.unlink(tmp_path_str)
            except OSError:
                pass
            raise

    def load(self, item_id: str) -> dict:
        """Read and parse a saved item.  Raises FileNotFoundError if missing."""
        path = self._path(item_id)
        if not path.exists():
            raise FileNotFoundError(f"Not found: {item_id}")
        return json.loads(path.read_text(encoding="utf-8"))

    def list_items(self) -> list[dict]:
        """Return summaries of all saved items, newest first."""
        items: list[dict] = []
        for p in sorted(
            self.base_path.glob(f"*{self.suffix}"),
            key=lambda f: f.stat().st_mtime,
            reverse=True,
        ):
            try:
                data = json.loads(p.read_text(encoding="utf-8"))
                stat = os.stat(p)
            except (json.JSONDecodeError, OSError):
                logger.warning("Skipping unreadable file %s", p.name)
                continue
            items.append(
                {
                    "id": p.stem,
                    "name": data.get("name", p.stem),
                    "modified_at": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
                }
            )
        return items

    def delete(self, item_id: str) -> None:
        """Delete a saved item.  Raises FileNotFoundError if missing."""
        path = self._path(item_id)
        if not path.exists():
            raise FileNotFoundError(f"Not found: {item_id}")
        path.unlink()


# ---------------------------------------------------------------------------
# MemoryStorage: in-memory, for stateless mode
# ---------------------------------------------------------------------------


class MemoryStorage:
    """Stores items in an in-memory dict.

    Data is NOT preserved across process restarts.  ``save`` and ``load``
    deep-copy so callers cannot mutate internal state via a returned
    reference.
    """

    def __init__(self) -> None:
        self._store: dict[str, dict] = {}
        self._timestamps: dict[str, datetime] = {}

    def save(self, item_id: str, data: dict) -> None:
        if not item_id:
            raise ValueError(f"Invalid id: {item_id!r}")
        self._store[item_id] = copy.deepcopy(data)
        self._timestamps[item_id] = datetime.now(tz=timezone.utc)

    def load(self, item_id: str) -> dict:
        """Return a deep copy of the stored item.

        Raises
        ------
        FileNotFoundError
            If *item_id* has not been saved.
        """
        if item_id not in self._store:
            raise FileNotFoundError(f"Not found: {item_id}")
        return copy.deepcopy(self._store[item_id])

    def list_items(self) -> list[dict]:
        """Return summaries of all stored items, newest first."""
        items = [
            {
                "id": item_id,
                "name": data.get("name", item_id),
                "modified_at": self._timestamps[item_id].isoformat(),
            }
            for item_id, data in self._store.items()
        ]
        items.sort(key=lambda d: d["modified_at"], reverse=True)
        return items

    def delete(self, item_id: str) -> None:
        if item_id not in self._store:
            raise FileNotFoundError(f"Not found: {item_id}")
        del self._store[item_id]
        self._timestamps.pop(item_id, None)
