"""Validation rules — compute non-blocking warnings for a solved airway.

Implements:
  - A01 dental contact (blade pressing on the upper incisor)
  - A02 blade chord longer than the blade circle's diameter
  - A03 glottic plane out of reach of the final tube arc
  - A04 tube too short for the path it has to follow
  - A05 tube reaches the glottis without contacting the blade

All warnings are level="warn"; none of them stops a solve.  A02 and A03 are
the two conditions under which the solver produces NaN coordinates.
"""

from __future__ import annotations

import math

from airway.models import AirwayGeometry, AirwayParameters, ValidationWarning

# Angular budget slack before A04 fires (rad); absorbs rounding in the sum.
_BUDGET_TOLERANCE = 1e-9


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _check_a01(
    params: AirwayParameters, geometry: AirwayGeometry, out: list[ValidationWarning]
) -> None:
    """A01: blade surface overlaps the upper incisor."""
    if geometry.dental_damage:
        out.append(
            ValidationWarning(
                id="A01",
                message=(
                    f"Blade presses on the upper incisor "
                    f"({-geometry.blade_upper_incisor_distance:.1f} mm overlap) — dental damage risk"
                ),
                fields=["bladeAngle", "bladeRadius", "bladeThickness", "lowerIncisorX", "lowerIncisorY"],
            )
        )


def _check_a02(
    params: AirwayParameters, geometry: AirwayGeometry, out: list[ValidationWarning]
) -> None:
    """A02: bladeLength > 2 * bladeRadius — the chord cannot fit the circle."""
    if params.blade_length > 2 * params.blade_radius:
        out.append(
            ValidationWarning(
                id="A02",
                message=(
                    f"Blade length ({params.blade_length:.0f} mm) exceeds the blade "
                    f"diameter ({2 * params.blade_radius:.0f} mm)"
                ),
                fields=["bladeLength", "bladeRadius"],
            )
        )


def _check_a03(
    params: AirwayParameters, geometry: AirwayGeometry, out: list[ValidationWarning]
) -> None:
    """A03: the last tube arc never crosses the glottic plane."""
    if not _finite(geometry.tube_tip.x, geometry.tube_tip.y):
        out.append(
            ValidationWarning(
                id="A03",
                message="Glottic plane is out of reach of the tube curvature",
                fields=["glotticPlaneX", "tubeRadius", "tubeAngle"],
            )
        )


def _check_a04(
    params: AirwayParameters, geometry: AirwayGeometry, out: list[ValidationWarning]
) -> None:
    """A04: segments 2 and 3 alone need more tube than tubeLength provides."""
    if params.tube_radius <= 0 or not _finite(geometry.drawn_tube_radians):
        return
    budget = params.tube_length / params.tube_radius
    if geometry.drawn_tube_radians > budget + _BUDGET_TOLERANCE:
        needed = geometry.drawn_tube_radians * params.tube_radius
        out.append(
            ValidationWarning(
                id="A04",
                message=(
                    f"Tube too short — reaching the glottis needs {needed:.0f} mm, "
                    f"tube is {params.tube_length:.0f} mm"
                ),
                fields=["tubeLength"],
            )
        )


def _check_a05(
    params: AirwayParameters, geometry: AirwayGeometry, out: list[ValidationWarning]
) -> None:
    """A05: no deflection off the blade."""
    if geometry.tube_segment3 is None:
        out.append(
            ValidationWarning(
                id="A05",
                message="Tube does not contact the blade",
                fields=["tubeAngle", "bladeInsertion", "bladeAngle"],
            )
        )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def compute_warnings(
    params: AirwayParameters, geometry: AirwayGeometry
) -> list[ValidationWarning]:
    """Compute all non-blocking warnings for a parameter set and its solve.

    Each warning has a unique ID (A01-A05), a human-readable message, and the
    slider ids of the parameters involved.
    """
    warnings: list[ValidationWarning] = []

    _check_a01(params, geometry, warnings)
    _check_a02(params, geometry, warnings)
    _check_a03(params, geometry, warnings)
    _check_a04(params, geometry, warnings)
    _check_a05(params, geometry, warnings)

    return warnings
