"""Airway geometry solver -- parameters in, every drawable curve out.

- ``solve()`` -- total, deterministic, NaN-propagating.  Safe to call on every
  slider tick; a fixed number of trig operations per call.
- ``check_domain()`` -- reasons a parameter set cannot be solved.
- ``solve_checked()`` -- tagged result for callers that must not plot NaN.

The construction, leaves first:

1. Teeth.  The upper incisor is the anchor, the lower incisor an offset.
2. Blade.  An arc of ``blade_radius`` resting on the lower incisor, rotated by
   ``blade_angle``; ``blade_insertion`` slides the chord forward along the
   circle.
3. Tube segment 2.  An arc pivoting on the upper incisor at ``tube_angle``.
4. Contact.  Where segment 2 meets the blade (circle padded by half the blade
   and tube thickness), the tube leaves tangentially on segment 3.
5. Whatever reaches ``glottic_plane_x`` last ends at the tube tip.
6. Tube length left over is drawn outside the mouth as segment 1.
"""

from __future__ import annotations

import math

from airway.geometry.primitives import (
    acos_or_nan,
    arc_radians,
    arc_tip,
    asin_or_nan,
    calculate_bearing,
    distance_between,
    divide,
    find_intersection,
    point_on_arc,
    tangent_angle,
    translate,
)
from airway.models import (
    AirwayGeometry,
    AirwayParameters,
    Arc,
    LineSegment,
    Point,
    SolveResult,
)
from airway.validation import compute_warnings

# Glottis marker extends this far above and below the blade tip depth (mm).
GLOTTIS_HALF_LENGTH: float = 10.0

# The calibration ring has a fixed radius; only its sweep and position vary.
FIDUCIAL_RADIUS: float = 5.0


# ---------------------------------------------------------------------------
# Construction steps
# ---------------------------------------------------------------------------


def _place_teeth(params: AirwayParameters) -> tuple[Point, Point]:
    upper = Point(x=params.upper_incisor_x, y=params.upper_incisor_y)
    lower = Point(
        x=params.upper_incisor_x + params.lower_incisor_x,
        y=params.upper_incisor_y + params.lower_incisor_y,
    )
    return upper, lower


def _place_blade(params: AirwayParameters, lower_incisor: Point) -> Arc:
    """Blade arc through the lower incisor.

    ``blade_radians`` is the angle subtended by a chord of ``blade_length``.
    Insertion splits it around ``blade_angle``: at 0 % the whole arc trails
    behind the incisor, at 100 % it all lies ahead.
    """
    blade_radians = asin_or_nan(divide(params.blade_length, params.blade_radius * 2)) * 2
    inserted = params.blade_insertion / 100
    centre = translate(lower_incisor, params.blade_angle + math.pi, params.blade_radius)
    return Arc(
        x=centre.x,
        y=centre.y,
        radius=params.blade_radius,
        start_angle=params.blade_angle - blade_radians * (1 - inserted),
        end_angle=params.blade_angle + blade_radians * inserted,
        thickness=params.blade_thickness,
    )


def _tooth_rotation_centre(params: AirwayParameters) -> Point:
    """Pivot of the tube against the upper incisor, inset by half the tube OD."""
    return Point(
        x=params.upper_incisor_x - params.tube_od / 2,
        y=params.upper_incisor_y - params.tube_od / 2,
    )


def _initial_segment2(params: AirwayParameters, pivot: Point) -> Arc:
    # end_angle is a placeholder until the blade contact is resolved
    centre = translate(pivot, params.tube_angle + math.pi, params.tube_radius)
    return Arc(
        x=centre.x,
        y=centre.y,
        radius=params.tube_radius,
        start_angle=params.tube_angle,
        end_angle=params.tube_angle + 1,
        thickness=params.tube_od,
    )


def _reach_angle(arc: Arc, target_x: float) -> float:
    """Angle on *arc* whose x coordinate equals *target_x* (NaN if out of reach)."""
    return acos_or_nan(divide(target_x - arc.x, arc.radius))


def _deflects_off_blade(
    intersection: Point | None, blade_tip: Point, params: AirwayParameters
) -> bool:
    """Whether the contact point is a physical deflection, not a stray root.

    The tube only bends off the blade when it meets it past the blade tip and
    below the upper incisor.
    """
    return (
        intersection is not None
        and intersection.x > blade_tip.x
        and intersection.y > params.upper_incisor_y
    )


def _deflect(
    segment2: Arc, blade: Arc, intersection: Point, params: AirwayParameters
) -> tuple[Arc, Arc, float]:
    """Split the tube at *intersection*: returns (segment2, segment3, bend)."""
    blade_bearing = calculate_bearing(intersection, blade.center)
    segment2_bearing = calculate_bearing(intersection, segment2.center)
    segment2 = segment2.model_copy(update={"end_angle": segment2_bearing - math.pi})

    centre3 = translate(intersection, blade_bearing, params.tube_radius)
    start3 = blade_bearing + math.pi
    segment3 = Arc(
        x=centre3.x,
        y=centre3.y,
        radius=params.tube_radius,
        start_angle=start3,
        end_angle=start3,
        thickness=params.tube_od,
    )
    bend = tangent_angle(intersection, segment3.center, segment2.center)

    final_angle = _reach_angle(segment3, params.glottic_plane_x)
    # arcs never sweep backwards; NaN (unreachable plane) is kept as is
    if not math.isnan(final_angle) and final_angle < start3:
        final_angle = start3
    segment3 = segment3.model_copy(update={"end_angle": final_angle})
    return segment2, segment3, bend


def _outer_segment(
    params: AirwayParameters, pivot: Point, bend: float, remaining_radians: float
) -> Arc:
    """Segment 1: the unused tube length, bent back by the blade deflection."""
    centre = translate(pivot, params.tube_angle + math.pi + bend, params.tube_radius)
    end_angle = params.tube_angle + bend
    return Arc(
        x=centre.x,
        y=centre.y,
        radius=params.tube_radius,
        start_angle=end_angle - remaining_radians,
        end_angle=end_angle,
        thickness=params.tube_od,
    )


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def solve(params: AirwayParameters) -> AirwayGeometry:
    """Compute the full airway geometry for one parameter set.

    Never raises for out-of-domain input: an impossible blade chord or an
    unreachable glottic plane shows up as NaN coordinates in the result.
    """
    upper_incisor, lower_incisor = _place_teeth(params)

    blade = _place_blade(params, lower_incisor)
    blade_tip = arc_tip(blade)
    clearance = distance_between(blade.center, upper_incisor) - (
        blade.radius + params.blade_thickness
    )

    pivot = _tooth_rotation_centre(params)
    segment2 = _initial_segment2(params, pivot)
    intersection = find_intersection(
        segment2.center,
        segment2.radius,
        blade.center,
        blade.radius + (blade.thickness + params.tube_od) / 2,
    )

    segment3: Arc | None = None
    bend = 0.0
    if _deflects_off_blade(intersection, blade_tip, params):
        segment2, segment3, bend = _deflect(segment2, blade, intersection, params)
        tube_tip = arc_tip(segment3)
    else:
        final_angle = _reach_angle(segment2, params.glottic_plane_x)
        segment2 = segment2.model_copy(update={"end_angle": final_angle})
        tube_tip = point_on_arc(segment2, final_angle)

    drawn = arc_radians(segment2)
    if segment3 is not None:
        drawn += arc_radians(segment3)

    segment1: Arc | None = None
    remaining = divide(params.tube_length, params.tube_radius) - drawn
    if remaining > 0:
        segment1 = _outer_segment(params, pivot, bend, remaining)

    glottis = LineSegment(
        start=Point(x=params.glottic_plane_x, y=blade_tip.y - GLOTTIS_HALF_LENGTH),
        end=Point(x=params.glottic_plane_x, y=blade_tip.y + GLOTTIS_HALF_LENGTH),
    )
    fiducial = Arc(
        x=params.fiducial_x,
        y=params.fiducial_y,
        radius=FIDUCIAL_RADIUS,
        start_angle=params.fiducial_start_angle,
        end_angle=params.fiducial_end_angle,
        thickness=params.fiducial_thickness,
    )

    return AirwayGeometry(
        upper_incisor=upper_incisor,
        lower_incisor=lower_incisor,
        blade=blade,
        blade_tip=blade_tip,
        blade_upper_incisor_distance=clearance,
        tube_segment1=segment1,
        tube_segment2=segment2,
        tube_segment3=segment3,
        intersection=intersection,
        tube_tip=tube_tip,
        bend=bend,
        drawn_tube_radians=drawn,
        glottis=glottis,
        fiducial=fiducial,
    )


def check_domain(params: AirwayParameters) -> str:
    """Return why *params* cannot be solved, or ``""`` if they can be tried."""
    if not params.blade_radius > 0:
        return "Blade radius must be positive"
    if not params.tube_radius > 0:
        return "Tube radius must be positive"
    if params.blade_length > 2 * params.blade_radius:
        return "Blade length exceeds blade diameter"
    return ""


def _all_finite(value: object) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(_all_finite(v) for v in value.values())
    return True


def solve_checked(params: AirwayParameters) -> SolveResult:
    """Solve and tag the outcome instead of handing NaN to the caller.

    Returns ``status="out_of_domain"`` with a reason and no geometry when the
    parameters are outside the solvable domain or the tube cannot reach the
    glottic plane.  Warnings are attached in both cases.
    """
    geometry = solve(params)
    warnings = compute_warnings(params, geometry)

    reason = check_domain(params)
    if not reason and not (
        math.isfinite(geometry.tube_tip.x) and math.isfinite(geometry.tube_tip.y)
    ):
        reason = "Glottic plane unreachable by tube arc"
    if not reason and not _all_finite(geometry.model_dump()):
        reason = "Solved geometry has non-finite coordinates"

    if reason:
        return SolveResult(status="out_of_domain", reason=reason, warnings=warnings)
    return SolveResult(status="ok", geometry=geometry, warnings=warnings)
