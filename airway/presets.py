"""Built-in presets — named partial slider sets merged over the defaults.

Each preset only lists the sliders it changes; ``load_preset()`` merges it
over ``DEFAULT_SLIDERS`` so the result is always a complete, validated
``SliderConfig``.
"""

from __future__ import annotations

from airway.models import SliderConfig

DEFAULT_SLIDERS: SliderConfig = SliderConfig()

# Keys are slider ids, the same keys the persisted configuration uses.
PRESETS: dict[str, dict[str, float]] = {
    "normal": {
        "tubeAngle": 26,
        "bladeInsertion": 72,
        "lowerIncisorX": -25,
        "lowerIncisorY": 0,
    },
    # Retruded, barely opened jaw: the blade has to sit flat and rides on the
    # upper teeth, and the tube misses the blade entirely.
    "difficult": {
        "lowerIncisorX": -12,
        "lowerIncisorY": 5,
        "bladeAngle": 10,
        "bladeInsertion": 50,
        "tubeAngle": 30,
        "glotticPlaneX": 150,
    },
    "pediatric": {
        "tubeRadius": 110,
        "tubeOD": 6,
        "tubeLength": 200,
        "bladeLength": 100,
        "bladeRadius": 90,
        "bladeThickness": 10,
        "bladeInsertion": 70,
        "lowerIncisorX": -18,
        "glotticPlaneX": 190,
    },
    "optimal": {
        "bladeInsertion": 80,
        "lowerIncisorX": -30,
    },
}

# Number keys 1-3 select these presets.
KEYBOARD_PRESETS: tuple[str, ...] = ("normal", "difficult", "optimal")


class PresetNotFoundError(KeyError):
    """Raised when a preset name is not one of the built-ins."""


def preset_names() -> list[str]:
    return list(PRESETS)


def load_preset(name: str) -> SliderConfig:
    """Return the complete slider set for preset *name*.

    Raises
    ------
    PresetNotFoundError
        If *name* is not a built-in preset.
    """
    try:
        overrides = PRESETS[name]
    except KeyError:
        raise PresetNotFoundError(f"Preset not found: {name}") from None
    return DEFAULT_SLIDERS.with_overrides(overrides)


def preset_for_key(key: str) -> str | None:
    """Map a number key ("1".."3") to its preset name."""
    if not key.isdigit():
        return None
    index = int(key) - 1
    if 0 <= index < len(KEYBOARD_PRESETS):
        return KEYBOARD_PRESETS[index]
    return None
