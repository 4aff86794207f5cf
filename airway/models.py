"""Pydantic models — shared contract between all airway modules.

API Naming Contract:
  - Python code uses snake_case field names.
  - Clients (and the persisted configuration blob) use the UI slider ids,
    which are camelCase (``tubeAngle``, ``glotticPlaneX``).  Models inherit
    CamelModel so ``model_dump(by_alias=True)`` produces those keys.
  - ``tubeOD`` does not follow the camelCase generator and carries an explicit
    alias.

Units: lengths are millimetres.  ``SliderConfig`` holds angles in degrees
(what the controls show); ``AirwayParameters`` holds them in radians (what
the solver consumes).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Fixed anatomy
# ---------------------------------------------------------------------------

# The upper incisor is the origin of the whole construction; the controls
# never move it.
UPPER_INCISOR_X: float = 300.0
UPPER_INCISOR_Y: float = 200.0

SolveStatus = Literal["ok", "out_of_domain"]


# ---------------------------------------------------------------------------
# Base models
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    """Base for models serialized to clients with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class FrozenModel(CamelModel):
    """Immutable camelCase model used for derived geometry."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# SliderConfig: 17 user-adjustable controls
# ---------------------------------------------------------------------------

class SliderConfig(CamelModel):
    """Current value of every control.  Flat structure, angles in degrees.

    Ranges are the realistic domain bounds of the controls.  They do not
    guarantee a solvable geometry (e.g. a long blade on a tight radius).
    """

    # ── Tube ──────────────────────────────────────────────────────────
    tube_angle: float = Field(default=26.0, ge=0, le=60)
    tube_radius: float = Field(default=150.0, ge=80, le=200)
    tube_od: float = Field(default=10.0, ge=4, le=14, alias="tubeOD")
    glottic_plane_x: float = Field(default=165.0, ge=100, le=220)
    tube_length: float = Field(default=280.0, ge=150, le=320)

    # ── Blade ─────────────────────────────────────────────────────────
    blade_length: float = Field(default=140.0, ge=80, le=160)
    blade_thickness: float = Field(default=15.0, ge=5, le=20)
    blade_insertion: float = Field(default=72.0, ge=0, le=100)  # %
    blade_radius: float = Field(default=118.0, ge=60, le=160)
    blade_angle: float = Field(default=18.0, ge=0, le=40)

    # ── Jaw ───────────────────────────────────────────────────────────
    lower_incisor_x: float = Field(default=-25.0, ge=-50, le=50)
    lower_incisor_y: float = Field(default=0.0, ge=-50, le=50)

    # ── Fiducial (cosmetic calibration ring) ──────────────────────────
    fiducial_start_angle: float = Field(default=0.0, ge=0, le=360)
    fiducial_end_angle: float = Field(default=360.0, ge=0, le=360)
    fiducial_thickness: float = Field(default=2.0, ge=1, le=10)
    fiducial_x: float = Field(default=120.0, ge=100, le=400)
    fiducial_y: float = Field(default=120.0, ge=100, le=300)

    def with_overrides(self, overrides: Mapping[str, float]) -> SliderConfig:
        """Return a new config with *overrides* merged over this one.

        Keys may be slider ids (``tubeAngle``) or field names (``tube_angle``).
        The merged values are validated against the slider ranges.
        """
        fields = type(self).model_fields
        data = self.model_dump(by_alias=True)
        for key, value in overrides.items():
            field = fields.get(key)
            data[field.alias if field is not None and field.alias else key] = value
        return type(self).model_validate(data)

    def to_parameters(self) -> AirwayParameters:
        """Convert slider readings into solver input (degrees → radians)."""
        return AirwayParameters(
            upper_incisor_x=UPPER_INCISOR_X,
            upper_incisor_y=UPPER_INCISOR_Y,
            lower_incisor_x=self.lower_incisor_x,
            lower_incisor_y=self.lower_incisor_y,
            blade_length=self.blade_length,
            blade_thickness=self.blade_thickness,
            blade_insertion=self.blade_insertion,
            blade_radius=self.blade_radius,
            blade_angle=math.radians(self.blade_angle),
            tube_length=self.tube_length,
            tube_radius=self.tube_radius,
            tube_od=self.tube_od,
            tube_angle=math.radians(self.tube_angle),
            glottic_plane_x=self.glottic_plane_x,
            fiducial_start_angle=math.radians(self.fiducial_start_angle),
            fiducial_end_angle=math.radians(self.fiducial_end_angle),
            fiducial_thickness=self.fiducial_thickness,
            fiducial_x=self.fiducial_x,
            fiducial_y=self.fiducial_y,
        )


# ---------------------------------------------------------------------------
# AirwayParameters: solver input
# ---------------------------------------------------------------------------

class AirwayParameters(CamelModel):
    """Solver input.  Lengths in mm, angles in radians.

    Only ``blade_insertion`` is range-checked: everything else may be out of
    the geometric domain, in which case the solver yields NaN coordinates and
    ``solve_checked`` reports the reason.
    """

    upper_incisor_x: float = UPPER_INCISOR_X
    upper_incisor_y: float = UPPER_INCISOR_Y
    lower_incisor_x: float = -25.0
    lower_incisor_y: float = 0.0

    blade_length: float = 140.0
    blade_radius: float = 118.0
    blade_angle: float = math.radians(18.0)
    blade_insertion: float = Field(default=72.0, ge=0, le=100)
    blade_thickness: float = 15.0

    tube_length: float = 280.0
    tube_radius: float = 150.0
    tube_od: float = Field(default=10.0, alias="tubeOD")
    tube_angle: float = math.radians(26.0)

    glottic_plane_x: float = 165.0

    fiducial_start_angle: float = 0.0
    fiducial_end_angle: float = 2 * math.pi
    fiducial_thickness: float = 2.0
    fiducial_x: float = 120.0
    fiducial_y: float = 120.0


# ---------------------------------------------------------------------------
# Display options and persisted configuration
# ---------------------------------------------------------------------------

class DisplayOptions(CamelModel):
    """The two boolean display flags saved alongside the sliders."""

    show_labels: bool = True
    show_help: bool = True


class SavedConfiguration(SliderConfig):
    """Flat persisted blob: every slider value plus the display flags."""

    show_labels: bool = True
    show_help: bool = True

    @classmethod
    def capture(cls, sliders: SliderConfig, display: DisplayOptions) -> SavedConfiguration:
        return cls(**sliders.model_dump(), **display.model_dump())

    def sliders(self) -> SliderConfig:
        return SliderConfig(**self.model_dump(exclude={"show_labels", "show_help"}))

    def display(self) -> DisplayOptions:
        return DisplayOptions(show_labels=self.show_labels, show_help=self.show_help)


# ---------------------------------------------------------------------------
# Geometry: computed by the solver, read-only
# ---------------------------------------------------------------------------

class Point(FrozenModel):
    x: float
    y: float


class Arc(FrozenModel):
    """Circular arc: centre, radius, angular extent and stroke thickness."""

    x: float
    y: float
    radius: float
    start_angle: float
    end_angle: float
    thickness: float

    @property
    def center(self) -> Point:
        return Point(x=self.x, y=self.y)


class LineSegment(FrozenModel):
    start: Point
    end: Point


class AirwayGeometry(FrozenModel):
    """Every curve and point needed to draw and hit-test one solve.

    ``tube_segment2`` always exists.  ``tube_segment3`` exists only when the
    tube deflects off the blade, ``tube_segment1`` only when tube length is
    left over after segments 2 and 3.
    """

    upper_incisor: Point
    lower_incisor: Point

    blade: Arc
    blade_tip: Point
    # Clearance between the thick blade and the upper incisor; negative
    # means the blade is pressing on the teeth.
    blade_upper_incisor_distance: float

    tube_segment1: Arc | None = None
    tube_segment2: Arc
    tube_segment3: Arc | None = None
    intersection: Point | None = None
    tube_tip: Point
    bend: float = 0.0
    drawn_tube_radians: float = 0.0

    glottis: LineSegment
    fiducial: Arc

    @property
    def dental_damage(self) -> bool:
        return self.blade_upper_incisor_distance < 0

    def tube_segments(self) -> list[Arc]:
        """Present tube arcs, outermost first."""
        return [
            arc
            for arc in (self.tube_segment1, self.tube_segment2, self.tube_segment3)
            if arc is not None
        ]


# ---------------------------------------------------------------------------
# Validation Warning / solve result
# ---------------------------------------------------------------------------

class ValidationWarning(CamelModel):
    """Non-blocking validation warning."""

    id: str  # A01-A05
    level: Literal["warn"] = "warn"
    message: str
    fields: list[str] = Field(default_factory=list)


class SolveResult(CamelModel):
    """Tagged solve outcome: geometry when in domain, a reason otherwise."""

    status: SolveStatus = "ok"
    geometry: AirwayGeometry | None = None
    reason: str = ""
    warnings: list[ValidationWarning] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# REST Request/Response Types
# ---------------------------------------------------------------------------

class RenderRequest(CamelModel):
    """Request body for POST /api/render."""

    sliders: SliderConfig = Field(default_factory=SliderConfig)
    display: DisplayOptions = Field(default_factory=DisplayOptions)


class ConfigurationSummary(CamelModel):
    """Summary for configuration listing (GET /api/configurations)."""

    id: str
    name: str
    modified_at: str


class PresetSummary(CamelModel):
    """Summary for preset listing (GET /api/presets)."""

    id: str
    name: str
    builtin: bool = False
    created_at: str = ""


class SavePresetRequest(CamelModel):
    """Request body for POST /api/presets."""

    name: str
    sliders: SliderConfig
