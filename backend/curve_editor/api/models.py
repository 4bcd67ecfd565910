"""
Pydantic data models for the curve editor API.

These models define the request and response shapes exchanged with the
rendering/input client.  Numeric request fields are deliberately typed
loosely: the editing surface must stay usable while a user is half-way
through typing a value, so unparsable or non-finite numbers are replaced
with a fallback by ``mode="before"`` validators instead of being
rejected with a 422.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..services.config import (
    DEFAULT_SAMPLES_PER_SEGMENT,
    DEFAULT_TENSION,
    DEFAULT_GRID_STEP,
)
from ..services.exporters import (
    sanitize_samples_per_segment,
    sanitize_spline_order,
    sanitize_spline_weight,
)
from ..services.grid_snap import finite_or, sanitize_grid_step
from ..services.tangents import clamp_tension


def _as_bool(value: Any, fallback: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "on"}:
            return True
        if v in {"0", "false", "no", "off"}:
            return False
    return fallback


class EditorSettings(BaseModel):
    """Configuration of one editing session.

    Every field tolerates bad input: invalid values fall back to the
    field default.
    """

    snapEnabled: bool = Field(default=False, description="Snap edited coordinates to the grid")
    gridStep: float = Field(default=DEFAULT_GRID_STEP, description="Grid spacing in model units")
    tension: float = Field(default=DEFAULT_TENSION, description="Auto tangent tension (0-1)")
    showHandles: bool = Field(default=False, description="Show tangent handles (display only)")
    smoothPreview: bool = Field(
        default=True, description="Sample the preview curve finely rather than coarsely"
    )
    samplesPerSegment: int = Field(
        default=DEFAULT_SAMPLES_PER_SEGMENT, description="Samples per segment for exports (>= 2)"
    )
    splineOrder: Optional[int] = Field(
        default=None, description="Order forwarded to the Spline export when >= 3"
    )
    splineWeight: Literal["default", "absx"] = Field(
        default="default", description="Weighting expression of the Spline export"
    )

    @field_validator("snapEnabled", mode="before")
    @classmethod
    def _coerce_snap(cls, v: Any) -> bool:
        return _as_bool(v, False)

    @field_validator("showHandles", mode="before")
    @classmethod
    def _coerce_handles(cls, v: Any) -> bool:
        return _as_bool(v, False)

    @field_validator("smoothPreview", mode="before")
    @classmethod
    def _coerce_smooth(cls, v: Any) -> bool:
        return _as_bool(v, True)

    @field_validator("gridStep", mode="before")
    @classmethod
    def _coerce_step(cls, v: Any) -> float:
        return sanitize_grid_step(v)

    @field_validator("tension", mode="before")
    @classmethod
    def _coerce_tension(cls, v: Any) -> float:
        return clamp_tension(finite_or(v, DEFAULT_TENSION))

    @field_validator("samplesPerSegment", mode="before")
    @classmethod
    def _coerce_samples(cls, v: Any) -> int:
        return sanitize_samples_per_segment(v)

    @field_validator("splineOrder", mode="before")
    @classmethod
    def _coerce_order(cls, v: Any) -> Optional[int]:
        return sanitize_spline_order(v)

    @field_validator("splineWeight", mode="before")
    @classmethod
    def _coerce_weight(cls, v: Any) -> str:
        return sanitize_spline_weight(v)


class SettingsUpdate(BaseModel):
    """Partial settings update; omitted fields keep their current value."""

    snapEnabled: Any = None
    gridStep: Any = None
    tension: Any = None
    showHandles: Any = None
    smoothPreview: Any = None
    samplesPerSegment: Any = None
    splineOrder: Any = None
    splineWeight: Any = None


class CoordinateRequest(BaseModel):
    """A model-space coordinate written by the input layer."""

    x: Any = Field(default=0.0, description="X coordinate in model units")
    y: Any = Field(default=0.0, description="Y coordinate in model units")
    bypassSnap: bool = Field(
        default=False, description="Skip grid snapping for this call (modifier key)"
    )

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coerce_coord(cls, v: Any) -> float:
        return finite_or(v, 0.0)


class CoordinateEdit(BaseModel):
    """Direct edit of one or both coordinates of a point."""

    x: Any = None
    y: Any = None


class TangentRequest(BaseModel):
    """Absolute manual tangent vector."""

    tx: Any = Field(default=0.0)
    ty: Any = Field(default=0.0)

    @field_validator("tx", "ty", mode="before")
    @classmethod
    def _coerce_component(cls, v: Any) -> float:
        return finite_or(v, 0.0)


class TangentEdit(BaseModel):
    """Edit of a single tangent field from the points panel."""

    tx: Any = None
    ty: Any = None
    angleDeg: Any = None
    magnitude: Any = None


class ManualToggle(BaseModel):
    enabled: bool = True


class SessionInfo(BaseModel):
    sessionId: str = Field(..., description="Identifier of the editing session")
    settings: EditorSettings


class PointView(BaseModel):
    """A control point as shown in the editable points table."""

    index: int = Field(..., description="1-based position in sorted order")
    id: int
    x: float
    y: float
    manual: bool = Field(..., description="True when the tangent is set manually")
    tx: float = Field(..., description="Clamped tangent x component")
    ty: float = Field(..., description="Clamped tangent y component")
    angleDeg: float
    magnitude: float
    handleX: float
    handleY: float


class Trace(BaseModel):
    """Plain coordinate arrays for a chart trace; ``None`` breaks a line."""

    x: List[Optional[float]] = Field(default_factory=list)
    y: List[Optional[float]] = Field(default_factory=list)


class SnapshotResponse(BaseModel):
    sessionId: str
    points: List[PointView]
    curve: Trace
    markers: Trace
    handles: Trace
    handleLinks: Trace
    handlesVisible: bool
    gridTick: float = Field(..., description="Axis tick spacing matching the grid step")
    settings: EditorSettings


class TangentResponse(BaseModel):
    id: int
    manual: bool
    tx: float
    ty: float
    clampedTx: float
    clampedTy: float


class PickResponse(BaseModel):
    hit: bool
    id: Optional[int] = None
    distance: Optional[float] = None
    tolerance: float


class DeleteAtResponse(BaseModel):
    action: Literal["deletedPoint", "clearedHandle", "none"]
    id: Optional[int] = None
    snapshot: SnapshotResponse


class CurveResponse(BaseModel):
    samplesPerSegment: int
    points: List[List[float]]


class ClipboardResponse(BaseModel):
    text: Optional[str] = None

