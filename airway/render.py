"""SVG rendering of a solved airway.

Pure projection of an ``AirwayGeometry`` through a ``Viewport``: nothing is
re-derived here.  Elements whose coordinates are not finite (an out-of-domain
solve) are skipped instead of being plotted.

Colours and stroke styles live only in this module.
"""

from __future__ import annotations

import math
from xml.sax.saxutils import escape

import numpy as np
from numpy.typing import NDArray

from airway.geometry.primitives import TWO_PI
from airway.interaction import Viewport
from airway.models import AirwayGeometry, Arc, DisplayOptions, LineSegment, Point

CANVAS_WIDTH = 1600
CANVAS_HEIGHT = 1200

ARC_SAMPLES = 96

TOOTH_HEIGHT = 10.0  # mm
DOT_RADIUS = 2.0  # mm
FONT_SIZE = 6.0  # mm
LABEL_OFFSET = 15.0  # mm

BLADE_COLOUR = "#a0a0a0"
TUBE_COLOUR = "rgba(0, 0, 255, 0.5)"
FIDUCIAL_COLOUR = "pink"
GLOTTIS_COLOUR = "#ff3333"
LABEL_COLOUR = "darkgrey"
HELP_COLOUR = "#90EE90"
DAMAGE_COLOUR = "red"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _point_ok(p: Point | None) -> bool:
    return p is not None and _finite(p.x, p.y)


def _arc_ok(arc: Arc | None) -> bool:
    return arc is not None and _finite(arc.x, arc.y, arc.radius, arc.start_angle, arc.end_angle)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _points_attr(points: NDArray[np.float64]) -> str:
    return " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in points)


def arc_polyline(arc: Arc, viewport: Viewport, samples: int = ARC_SAMPLES) -> NDArray[np.float64]:
    """Screen-space polyline along *arc*, shape (samples, 2).

    Sweeps from start to end angle in the positive direction, wrapping like a
    canvas arc; a difference of 2pi or more draws the full circle.
    """
    sweep = arc.end_angle - arc.start_angle
    sweep = TWO_PI if abs(sweep) >= TWO_PI else sweep % TWO_PI
    angles = arc.start_angle + np.linspace(0.0, sweep, samples)
    model = np.column_stack(
        (arc.x + arc.radius * np.cos(angles), arc.y + arc.radius * np.sin(angles))
    )
    offset = np.array([viewport.x_offset, viewport.y_offset])
    return (model + offset) * viewport.factor


def _arc(arc: Arc, viewport: Viewport, colour: str) -> str:
    width = viewport.scale_length(arc.thickness)
    return (
        f'<polyline class="arc" points="{_points_attr(arc_polyline(arc, viewport))}" '
        f'fill="none" stroke="{colour}" stroke-width="{_fmt(width)}" stroke-linecap="butt"/>'
    )


def _dot(p: Point, viewport: Viewport, colour: str) -> str:
    s = viewport.to_screen(p)
    r = viewport.scale_length(DOT_RADIUS)
    return f'<circle cx="{_fmt(s.x)}" cy="{_fmt(s.y)}" r="{_fmt(r)}" fill="{colour}"/>'


def _tooth(p: Point, height: float, viewport: Viewport, stroke: str) -> str:
    s = viewport.to_screen(p)
    h = viewport.scale_length(height)
    w = h / 3
    pts = np.array([[s.x, s.y], [s.x + h, s.y + w], [s.x + h, s.y - w]])
    return (
        f'<polygon class="tooth" points="{_points_attr(pts)}" fill="#eeeeee" '
        f'stroke="{stroke}" stroke-width="{_fmt(viewport.factor)}"/>'
    )


def _line(segment: LineSegment, viewport: Viewport, colour: str, width: float) -> str:
    a = viewport.to_screen(segment.start)
    b = viewport.to_screen(segment.end)
    return (
        f'<line x1="{_fmt(a.x)}" y1="{_fmt(a.y)}" x2="{_fmt(b.x)}" y2="{_fmt(b.y)}" '
        f'stroke="{colour}" stroke-width="{_fmt(viewport.scale_length(width))}"/>'
    )


_ANCHORS = {"left": "end", "right": "start", "above": "middle", "below": "middle"}


def _label(
    p: Point,
    text: str,
    alignment: str,
    viewport: Viewport,
    colour: str = LABEL_COLOUR,
    offset: float = LABEL_OFFSET,
) -> str:
    s = viewport.to_screen(p)
    off = viewport.scale_length(offset)
    size = viewport.scale_length(FONT_SIZE)
    x, y = s.x, s.y
    if alignment == "right":
        x, y = x + off, y + size / 2
    elif alignment == "above":
        y -= off
    elif alignment == "below":
        y += off + size
    else:
        x, y = x - off, y + size / 2
    return (
        f'<text x="{_fmt(x)}" y="{_fmt(y)}" font-family="Arial" font-size="{_fmt(size)}" '
        f'fill="{colour}" text-anchor="{_ANCHORS.get(alignment, "end")}">{escape(text)}</text>'
    )


# Double-headed arrow outline, horizontal, centred on the origin (mm).
_ARROW_OUTLINE = np.array(
    [
        [-10.0, 2.5], [10.0, 2.5], [10.0, 7.5], [20.0, 0.0], [10.0, -7.5],
        [10.0, -2.5], [-10.0, -2.5], [-10.0, -7.5], [-20.0, 0.0], [-10.0, 7.5],
    ]
)


def _help_arrow(
    centre: Point, text: str, vertical: bool, alignment: str, offset: float, viewport: Viewport
) -> str:
    outline = _ARROW_OUTLINE[:, ::-1] if vertical else _ARROW_OUTLINE
    s = viewport.to_screen(centre)
    pts = np.array([s.x, s.y]) + outline * viewport.factor
    shape = (
        f'<polygon class="help" points="{_points_attr(pts)}" fill="{HELP_COLOUR}" '
        f'stroke="{HELP_COLOUR}"/>'
    )
    return shape + _label(centre, text, alignment, viewport, HELP_COLOUR, offset)


def _help(geometry: AirwayGeometry, viewport: Viewport) -> list[str]:
    ui = geometry.upper_incisor
    blade_hint = Point(x=ui.x - 70, y=ui.y - 70)
    jaw_hint = Point(x=ui.x - 20, y=ui.y + 75)
    return [
        _help_arrow(Point(x=ui.x + 70, y=ui.y - 70), "Rotate tube", False, "above", 10, viewport),
        _help_arrow(blade_hint, "Advance-withdraw blade", True, "above", 25, viewport),
        _help_arrow(blade_hint, "Rotate blade", False, "left", 25, viewport),
        _help_arrow(jaw_hint, "Jaw thrust", True, "below", 25, viewport),
        _help_arrow(jaw_hint, "Mouth opening", False, "right", 25, viewport),
    ]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def render_svg(
    geometry: AirwayGeometry,
    display: DisplayOptions | None = None,
    viewport: Viewport | None = None,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
) -> str:
    """Draw *geometry* as a standalone SVG document."""
    display = display or DisplayOptions()
    viewport = viewport or Viewport()
    damage = geometry.dental_damage
    parts: list[str] = []

    if _point_ok(geometry.upper_incisor):
        stroke = DAMAGE_COLOUR if damage else "grey"
        parts.append(_tooth(geometry.upper_incisor, TOOTH_HEIGHT, viewport, stroke))
    if _point_ok(geometry.lower_incisor):
        parts.append(_tooth(geometry.lower_incisor, -TOOTH_HEIGHT, viewport, "grey"))

    if _arc_ok(geometry.blade):
        parts.append(_arc(geometry.blade, viewport, BLADE_COLOUR))
    if _point_ok(geometry.blade_tip):
        parts.append(_dot(geometry.blade_tip, viewport, "gray"))

    glottis = geometry.glottis
    if _point_ok(glottis.start) and _point_ok(glottis.end):
        parts.append(_line(glottis, viewport, GLOTTIS_COLOUR, 4.0))

    for segment in geometry.tube_segments():
        if _arc_ok(segment):
            parts.append(_arc(segment, viewport, TUBE_COLOUR))
    if geometry.tube_segment3 is not None and _point_ok(geometry.intersection):
        parts.append(_dot(geometry.intersection, viewport, "red"))

    if _arc_ok(geometry.fiducial):
        parts.append(_arc(geometry.fiducial, viewport, FIDUCIAL_COLOUR))

    if display.show_labels:
        parts.append(_label(geometry.lower_incisor, "Lower Incisor", "left", viewport))
        upper_text = "Damaged Upper Incisor" if damage else "Upper Incisor"
        parts.append(
            _label(
                geometry.upper_incisor,
                upper_text,
                "right",
                viewport,
                DAMAGE_COLOUR if damage else LABEL_COLOUR,
            )
        )
        if _point_ok(geometry.blade_tip):
            parts.append(_label(geometry.blade_tip, "Blade", "above", viewport))
        if _point_ok(glottis.start):
            parts.append(_label(glottis.start, "Glottis", "left", viewport, offset=5))
        if _point_ok(geometry.tube_tip):
            parts.append(_label(geometry.tube_tip, "Tube", "below", viewport))

    if display.show_help:
        parts.extend(_help(geometry, viewport))

    body = "\n  ".join(parts)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">\n  {body}\n</svg>\n'
    )
