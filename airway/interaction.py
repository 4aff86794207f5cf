"""Direct manipulation — hit-testing and drag/keyboard edits of the sliders.

The session owns all interaction state explicitly: the viewport, the current
slider values, the most recently solved geometry (overwritten on every
solve, last write wins) and the object being dragged.  Screen points are
canvas pixels; model points are millimetres.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from airway.geometry import solve
from airway.geometry.primitives import distance_between, midpoint
from airway.models import AirwayGeometry, Point, SliderConfig
from airway.presets import DEFAULT_SLIDERS, load_preset, preset_for_key

# Pixel radius around the lower incisor that grabs the jaw.
GRAB_RADIUS_PX: float = 50.0

# Keyboard step per slider (slider units); unlisted sliders step by 1.
SLIDER_STEPS: dict[str, float] = {
    "tube_angle": 0.5,
}


@dataclass(frozen=True)
class Viewport:
    """Model → screen mapping: ``screen = (model + offset) * factor``."""

    factor: float = 5.0
    x_offset: float = -100.0
    y_offset: float = -100.0

    def to_screen(self, point: Point) -> Point:
        return Point(
            x=(point.x + self.x_offset) * self.factor,
            y=(point.y + self.y_offset) * self.factor,
        )

    def to_model(self, point: Point) -> Point:
        return Point(
            x=point.x / self.factor - self.x_offset,
            y=point.y / self.factor - self.y_offset,
        )

    def scale_length(self, value: float) -> float:
        return value * self.factor


def slider_bounds(name: str) -> tuple[float, float]:
    """(min, max) of a slider, read from the SliderConfig field constraints."""
    low, high = float("-inf"), float("inf")
    for constraint in SliderConfig.model_fields[name].metadata:
        if hasattr(constraint, "ge"):
            low = constraint.ge
        if hasattr(constraint, "le"):
            high = constraint.le
    return low, high


def clamp_slider(name: str, value: float) -> float:
    low, high = slider_bounds(name)
    return min(high, max(low, value))


@dataclass
class InteractionSession:
    """Interaction state for one canvas."""

    sliders: SliderConfig = field(default_factory=DEFAULT_SLIDERS.model_copy)
    viewport: Viewport = field(default_factory=Viewport)
    geometry: AirwayGeometry | None = None
    dragging: str | None = None
    drag_start: Point | None = None

    def update(self, sliders: SliderConfig | None = None) -> AirwayGeometry:
        """Re-solve (optionally with new sliders) and keep the result."""
        if sliders is not None:
            self.sliders = sliders
        self.geometry = solve(self.sliders.to_parameters())
        return self.geometry

    def _adjust(self, deltas: dict[str, float]) -> AirwayGeometry:
        values = {
            name: clamp_slider(name, getattr(self.sliders, name) + delta)
            for name, delta in deltas.items()
        }
        return self.update(self.sliders.with_overrides(values))

    # -- hit-testing -------------------------------------------------------

    def closest_object(self, point: Point) -> str | None:
        """Name of the object under screen *point*, judged on the last solve.

        The lower incisor wins within ``GRAB_RADIUS_PX``; above the upper
        incisor the left half grabs the blade and the right half the tube;
        everything else moves the jaw.
        """
        if self.geometry is None:
            return None
        lower = self.viewport.to_screen(self.geometry.lower_incisor)
        upper = self.viewport.to_screen(self.geometry.upper_incisor)

        if distance_between(point, lower) < GRAB_RADIUS_PX:
            return "lowerIncisor"
        if point.y < upper.y:
            if point.x < midpoint(lower, upper).x:
                return "blade"
            return "tube"
        return "lowerIncisor"

    # -- dragging ----------------------------------------------------------

    def press(self, point: Point) -> str | None:
        target = self.closest_object(point)
        if target:
            self.dragging = target
            self.drag_start = point
        return target

    def move(self, point: Point) -> AirwayGeometry | None:
        """Turn the drag delta since the last sample into slider changes."""
        if self.dragging is None or self.drag_start is None:
            return None
        dx = point.x - self.drag_start.x
        dy = point.y - self.drag_start.y
        self.drag_start = point
        f = self.viewport.factor

        if self.dragging == "lowerIncisor":
            return self._adjust({"lower_incisor_x": dx / f, "lower_incisor_y": dy / f})
        if self.dragging == "tube":
            return self._adjust({"tube_angle": dx / (2 * f)})
        if self.dragging == "blade":
            return self._adjust({"blade_angle": dx / f, "blade_insertion": dy / f})
        return self.geometry

    def release(self) -> None:
        self.dragging = None
        self.drag_start = None

    # -- keyboard ----------------------------------------------------------

    def nudge(self, name: str, steps: float) -> AirwayGeometry:
        """Move slider *name* by *steps* increments, clamped to its range."""
        return self._adjust({name: steps * SLIDER_STEPS.get(name, 1.0)})


_ARROW_KEYS: dict[str, tuple[str, int]] = {
    "ArrowUp": ("tube_angle", 1),
    "ArrowDown": ("tube_angle", -1),
    "ArrowLeft": ("blade_insertion", -1),
    "ArrowRight": ("blade_insertion", 1),
}


def handle_key(session: InteractionSession, key: str) -> bool:
    """Apply a keyboard shortcut to *session*.  Returns False if unbound.

    Arrows nudge the tube angle and blade insertion, ``r`` resets to the
    defaults and the number keys load the keyboard presets.
    """
    if key in _ARROW_KEYS:
        name, steps = _ARROW_KEYS[key]
        session.nudge(name, steps)
        return True
    if key == "r":
        session.update(DEFAULT_SLIDERS.model_copy())
        return True
    preset = preset_for_key(key)
    if preset is not None:
        session.update(load_preset(preset))
        return True
    return False
