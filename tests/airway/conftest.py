"""Shared fixtures for airway tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from airway.geometry import solve
from airway.models import AirwayGeometry, AirwayParameters, SliderConfig
from airway.storage import LocalStorage, MemoryStorage


# ---------------------------------------------------------------------------
# Parameter Fixtures (used by solver, validation & render tests)
# ---------------------------------------------------------------------------


@pytest.fixture
def default_sliders() -> SliderConfig:
    """Every slider at its default position."""
    return SliderConfig()


@pytest.fixture
def default_params(default_sliders: SliderConfig) -> AirwayParameters:
    """Solver input for the default sliders (angles in radians)."""
    return default_sliders.to_parameters()


@pytest.fixture
def default_geometry(default_params: AirwayParameters) -> AirwayGeometry:
    """Solved default airway: tube deflects off the blade, no dental contact."""
    return solve(default_params)


@pytest.fixture
def no_contact_params() -> AirwayParameters:
    """Jaw moved far forward so the tube never meets the blade."""
    return AirwayParameters(lower_incisor_x=400)


# ---------------------------------------------------------------------------
# Storage Fixtures (used by route/storage tests)
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_storage(tmp_path: Path) -> LocalStorage:
    """Return a LocalStorage instance backed by a temporary directory."""
    return LocalStorage(base_path=str(tmp_path))


@pytest.fixture
def mem() -> MemoryStorage:
    """Fresh MemoryStorage instance for each test."""
    return MemoryStorage()
