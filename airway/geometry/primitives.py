"""Plane geometry primitives used by the airway solver.

Pure math on ``Point``/``Arc`` values -- no state, no logging.  Angles are
radians measured from +x towards +y; with screen coordinates (y down) that
is clockwise on the drawing.
"""

from __future__ import annotations

import math

from airway.models import Arc, Point

TWO_PI: float = 2 * math.pi


# ---------------------------------------------------------------------------
# Vector / trig primitives
# ---------------------------------------------------------------------------


def translate(origin: Point, angle: float, distance: float) -> Point:
    """Move *origin* by *distance* along bearing *angle*."""
    return Point(
        x=origin.x + math.cos(angle) * distance,
        y=origin.y + math.sin(angle) * distance,
    )


def midpoint(p1: Point, p2: Point) -> Point:
    return Point(x=(p1.x + p2.x) / 2, y=(p1.y + p2.y) / 2)


def distance_between(p1: Point, p2: Point) -> float:
    return math.hypot(p1.x - p2.x, p1.y - p2.y)


def calculate_bearing(p1: Point, p2: Point) -> float:
    """Bearing of *p2* as seen from *p1*, in (-pi, pi]."""
    return math.atan2(p2.y - p1.y, p2.x - p1.x)


def arc_radians(arc: Arc) -> float:
    """Angular span swept from start to end angle, normalised to [0, 2pi)."""
    span = (arc.end_angle - arc.start_angle) % TWO_PI
    # float modulo can land exactly on 2pi for tiny negative inputs
    return 0.0 if span >= TWO_PI else span


def point_on_arc(arc: Arc, angle: float) -> Point:
    return translate(arc.center, angle, arc.radius)


def arc_tip(arc: Arc) -> Point:
    """Point at the arc's end angle."""
    return point_on_arc(arc, arc.end_angle)


# ---------------------------------------------------------------------------
# Circle intersection & tangent angle
# ---------------------------------------------------------------------------


def find_intersection(
    center1: Point, radius1: float, center2: Point, radius2: float
) -> Point | None:
    """Intersection of two circles, or None when they do not meet.

    Of the two roots the one with the larger ``x + y`` is returned, and on an
    exact tie the one with the larger x.  With y pointing down this picks the
    root lying furthest along the down-right diagonal.

    Concentric or coincident circles have no single intersection and return
    None.
    """
    dx = center2.x - center1.x
    dy = center2.y - center1.y
    d = math.hypot(dx, dy)
    if d > radius1 + radius2 or d < abs(radius1 - radius2) or d == 0:
        return None

    a = (radius1 * radius1 - radius2 * radius2 + d * d) / (2 * d)
    # Tangent circles can leave a tiny negative value from rounding.
    h = math.sqrt(max(0.0, radius1 * radius1 - a * a))
    xm = center1.x + dx * a / d
    ym = center1.y + dy * a / d

    first = Point(x=xm + h * dy / d, y=ym - h * dx / d)
    second = Point(x=xm - h * dy / d, y=ym + h * dx / d)

    first_rank = first.x + first.y
    second_rank = second.x + second.y
    if first_rank > second_rank:
        return first
    if first_rank == second_rank and first.x > second.x:
        return first
    return second


def tangent_angle(intersection: Point, center1: Point, center2: Point) -> float:
    """Angle between the radii from *intersection* to two circle centres.

    For two circles touching at *intersection* this equals the angle between
    their tangents there, i.e. how sharply a curve changes direction when it
    moves from one circle to the other.
    """
    ux, uy = center1.x - intersection.x, center1.y - intersection.y
    vx, vy = center2.x - intersection.x, center2.y - intersection.y
    magnitude = math.hypot(ux, uy) * math.hypot(vx, vy)
    if magnitude == 0:
        return math.nan
    cos_theta = (ux * vx + uy * vy) / magnitude
    return math.acos(max(-1.0, min(1.0, cos_theta)))


# ---------------------------------------------------------------------------
# Domain-tolerant scalar helpers
# ---------------------------------------------------------------------------
# math.acos/asin raise on out-of-range input and float division raises on a
# zero divisor.  The solver reports such cases as NaN coordinates instead.


def acos_or_nan(value: float) -> float:
    return math.acos(value) if -1.0 <= value <= 1.0 else math.nan


def asin_or_nan(value: float) -> float:
    return math.asin(value) if -1.0 <= value <= 1.0 else math.nan


def divide(numerator: float, denominator: float) -> float:
    """IEEE division: x/0 is +/-inf, 0/0 is NaN."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator
