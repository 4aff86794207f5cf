"""Tests for built-in presets and their keyboard bindings."""

from __future__ import annotations

import pytest

from airway.geometry import solve_checked
from airway.models import SliderConfig
from airway.presets import (
    DEFAULT_SLIDERS,
    KEYBOARD_PRESETS,
    PRESETS,
    PresetNotFoundError,
    load_preset,
    preset_for_key,
    preset_names,
)


class TestLoadPreset:
    @pytest.mark.parametrize("name", list(PRESETS))
    def test_preset_is_complete_and_solvable(self, name: str) -> None:
        sliders = load_preset(name)
        assert isinstance(sliders, SliderConfig)
        result = solve_checked(sliders.to_parameters())
        assert result.status == "ok", result.reason

    def test_overrides_merge_over_defaults(self) -> None:
        optimal = load_preset("optimal")
        assert optimal.blade_insertion == 80
        assert optimal.lower_incisor_x == -30
        assert optimal.tube_radius == DEFAULT_SLIDERS.tube_radius

    def test_normal_matches_defaults(self) -> None:
        assert load_preset("normal") == DEFAULT_SLIDERS

    def test_unknown_preset(self) -> None:
        with pytest.raises(PresetNotFoundError, match="Preset not found: nope"):
            load_preset("nope")

    def test_not_found_is_a_key_error(self) -> None:
        with pytest.raises(KeyError):
            load_preset("nope")

    def test_preset_names(self) -> None:
        assert preset_names() == ["normal", "difficult", "pediatric", "optimal"]


class TestPresetOutcomes:
    def test_difficult_damages_teeth_and_misses_blade(self) -> None:
        result = solve_checked(load_preset("difficult").to_parameters())
        ids = [w.id for w in result.warnings]
        assert "A01" in ids
        assert "A05" in ids
        assert result.geometry.dental_damage
        assert result.geometry.tube_segment3 is None

    @pytest.mark.parametrize("name", ["normal", "pediatric", "optimal"])
    def test_good_presets_deflect_without_damage(self, name: str) -> None:
        result = solve_checked(load_preset(name).to_parameters())
        assert not result.geometry.dental_damage
        assert result.geometry.tube_segment3 is not None


class TestPresetForKey:
    def test_number_keys(self) -> None:
        assert [preset_for_key(k) for k in "123"] == list(KEYBOARD_PRESETS)

    @pytest.mark.parametrize("key", ["0", "4", "9", "a", ""])
    def test_unbound_keys(self, key: str) -> None:
        assert preset_for_key(key) is None
