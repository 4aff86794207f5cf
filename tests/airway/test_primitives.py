"""Tests for the plane geometry primitives."""

from __future__ import annotations

import math

import pytest

from airway.geometry.primitives import (
    TWO_PI,
    acos_or_nan,
    arc_radians,
    arc_tip,
    calculate_bearing,
    distance_between,
    divide,
    find_intersection,
    midpoint,
    tangent_angle,
    translate,
)
from airway.models import Arc, Point


def _arc(start: float, end: float, radius: float = 10.0) -> Arc:
    return Arc(x=0, y=0, radius=radius, start_angle=start, end_angle=end, thickness=1)


class TestVectorHelpers:
    def test_translate(self) -> None:
        p = translate(Point(x=1, y=1), math.pi / 2, 5)
        assert p.x == pytest.approx(1)
        assert p.y == pytest.approx(6)

    def test_midpoint_and_distance(self) -> None:
        a, b = Point(x=0, y=0), Point(x=6, y=8)
        assert midpoint(a, b) == Point(x=3, y=4)
        assert distance_between(a, b) == pytest.approx(10)

    def test_bearing_is_atan2_from_first_point(self) -> None:
        origin = Point(x=0, y=0)
        assert calculate_bearing(origin, Point(x=0, y=1)) == pytest.approx(math.pi / 2)
        assert calculate_bearing(origin, Point(x=-1, y=0)) == pytest.approx(math.pi)
        assert calculate_bearing(Point(x=0, y=1), origin) == pytest.approx(-math.pi / 2)


class TestArcRadians:
    def test_positive_span(self) -> None:
        assert arc_radians(_arc(0.5, 1.5)) == pytest.approx(1.0)

    def test_negative_difference_wraps(self) -> None:
        assert arc_radians(_arc(0.0, -math.pi / 2)) == pytest.approx(1.5 * math.pi)

    def test_full_turn_is_zero(self) -> None:
        assert arc_radians(_arc(0.0, TWO_PI)) == pytest.approx(0.0)

    def test_result_in_range(self) -> None:
        for start, end in [(0, 7), (-3, 3), (5, -20), (1e-17, 0)]:
            span = arc_radians(_arc(start, end))
            assert 0 <= span < TWO_PI

    def test_arc_tip_is_at_end_angle(self) -> None:
        tip = arc_tip(_arc(0.0, math.pi))
        assert tip.x == pytest.approx(-10)
        assert tip.y == pytest.approx(0, abs=1e-9)


class TestFindIntersection:
    def test_picks_root_with_larger_x_plus_y(self) -> None:
        p = find_intersection(Point(x=0, y=0), 5, Point(x=6, y=0), 5)
        assert p is not None
        assert p.x == pytest.approx(3)
        assert p.y == pytest.approx(4)

    def test_result_lies_on_both_circles(self) -> None:
        c1, c2 = Point(x=10, y=20), Point(x=40, y=5)
        p = find_intersection(c1, 25, c2, 30)
        assert p is not None
        assert distance_between(p, c1) == pytest.approx(25)
        assert distance_between(p, c2) == pytest.approx(30)

    def test_tie_broken_by_larger_x(self) -> None:
        # Roots (3, -3) and (-3, 3) have equal x + y.
        p = find_intersection(Point(x=0, y=0), math.sqrt(18), Point(x=6, y=6), math.sqrt(90))
        assert p is not None
        assert p.x > p.y

    def test_separate_circles(self) -> None:
        assert find_intersection(Point(x=0, y=0), 1, Point(x=10, y=0), 1) is None

    def test_contained_circle(self) -> None:
        assert find_intersection(Point(x=0, y=0), 10, Point(x=1, y=0), 1) is None

    def test_concentric_circles(self) -> None:
        assert find_intersection(Point(x=0, y=0), 5, Point(x=0, y=0), 5) is None

    def test_tangent_circles_touch_once(self) -> None:
        p = find_intersection(Point(x=0, y=0), 5, Point(x=10, y=0), 5)
        assert p is not None
        assert p.x == pytest.approx(5)
        assert p.y == pytest.approx(0, abs=1e-6)


class TestTangentAngle:
    def test_right_angle(self) -> None:
        angle = tangent_angle(Point(x=0, y=0), Point(x=1, y=0), Point(x=0, y=1))
        assert angle == pytest.approx(math.pi / 2)

    def test_same_direction_is_zero(self) -> None:
        angle = tangent_angle(Point(x=0, y=0), Point(x=1, y=1), Point(x=3, y=3))
        assert angle == pytest.approx(0, abs=1e-6)

    def test_degenerate_is_nan(self) -> None:
        assert math.isnan(tangent_angle(Point(x=0, y=0), Point(x=0, y=0), Point(x=1, y=0)))


class TestScalarHelpers:
    def test_acos_out_of_range(self) -> None:
        assert math.isnan(acos_or_nan(1.5))
        assert acos_or_nan(1.0) == 0.0

    def test_divide_by_zero(self) -> None:
        assert divide(1, 0) == math.inf
        assert divide(-1, 0) == -math.inf
        assert math.isnan(divide(0, 0))
        assert divide(6, 3) == 2
