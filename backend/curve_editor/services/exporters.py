"""
Export serializers for the Hermite curve.

Four text artifacts can be produced from a :class:`CurveModel`:

* a ``Polyline`` command through the densely sampled curve,
* a ``Spline`` command fitted through the raw sorted control points,
* a parametric ``Curve`` command with one cubic per segment, and
* a CSV table of the sampled points.

The first three target the GeoGebra scripting language.  None of the
functions here mutate the model.

The parametric expression is assembled from a list of
:class:`ParametricPiece` records rather than by ad hoc string
concatenation.  Every piece except the last opens one ``If(`` branch, so
the number of closing brackets is always ``len(pieces) - 1``.
"""

from __future__ import annotations

import csv
import io
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .config import (
    DEFAULT_SAMPLES_PER_SEGMENT,
    LIST_LITERAL_DECIMALS,
    MAX_SAMPLES_PER_SEGMENT,
    MIN_EXPORT_SAMPLES_PER_SEGMENT,
    MIN_SPLINE_ORDER,
    PARAMETRIC_DECIMALS,
)
from .curve_model import CurveModel, Segment
from .hermite import Vec

INSUFFICIENT_POINTS_MESSAGE = "// Add at least two points"

SPLINE_WEIGHTS = {
    "default": "sqrt(x^2+y^2)",
    "absx": "abs(x)+0*y",
}
DEFAULT_SPLINE_WEIGHT = "default"


def sanitize_samples_per_segment(samples: Any) -> int:
    """Return ``samples`` as an int >= 2, or the default sample count.

    Counts above ``MAX_SAMPLES_PER_SEGMENT`` are clamped to it.
    """
    if isinstance(samples, bool):
        return DEFAULT_SAMPLES_PER_SEGMENT
    try:
        value = int(samples)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_SAMPLES_PER_SEGMENT
    if value < MIN_EXPORT_SAMPLES_PER_SEGMENT:
        return DEFAULT_SAMPLES_PER_SEGMENT
    return min(value, MAX_SAMPLES_PER_SEGMENT)


def sanitize_spline_order(order: Any) -> Optional[int]:
    """Return ``order`` if it is an int >= 3, else ``None``."""
    if order is None or isinstance(order, bool):
        return None
    try:
        value = int(order)
    except (TypeError, ValueError, OverflowError):
        return None
    return value if value >= MIN_SPLINE_ORDER else None


def sanitize_spline_weight(weight: Any) -> str:
    key = str(weight or "").strip().lower()
    return key if key in SPLINE_WEIGHTS else DEFAULT_SPLINE_WEIGHT


def format_number(value: float, decimals: int) -> str:
    if not math.isfinite(value):
        return "NaN"
    return f"{value:.{decimals}f}"


def to_list_literal(points: Iterable[Vec], decimals: int = LIST_LITERAL_DECIMALS) -> str:
    """Format points as a GeoGebra list literal ``{ (x1,y1), (x2,y2) }``."""
    body = ", ".join(
        f"({format_number(x, decimals)},{format_number(y, decimals)})" for x, y in points
    )
    return "{ " + body + " }"


def sample_curve_points(model: CurveModel, samples_per_segment: Any = DEFAULT_SAMPLES_PER_SEGMENT) -> List[Vec]:
    """Sample the curve for export, falling back to the default sample count."""
    return model.curve_polyline(sanitize_samples_per_segment(samples_per_segment))


# ---------------------------------------------------------------------------
# Polyline / spline
# ---------------------------------------------------------------------------


def make_polyline_command(model: CurveModel, samples_per_segment: Any = DEFAULT_SAMPLES_PER_SEGMENT) -> str:
    """Build ``Polyline({ ... })`` through the sampled Hermite curve."""
    points = sample_curve_points(model, samples_per_segment)
    return f"Polyline({to_list_literal(points)})"


def make_spline_command(
    model: CurveModel,
    order: Any = None,
    weight: Any = DEFAULT_SPLINE_WEIGHT,
) -> str:
    """Build a ``Spline`` command through the sorted control points.

    The Hermite curve is not sampled here; GeoGebra fits its own spline.
    ``order`` is only forwarded when it is at least 3, and the weighting
    expression is only emitted together with it.
    """
    points = [p.position for p in model.sorted_points()]
    lines = [f"list1 = {to_list_literal(points)}"]
    spline_order = sanitize_spline_order(order)
    if spline_order is not None:
        weight_expr = SPLINE_WEIGHTS[sanitize_spline_weight(weight)]
        lines.append(f"spl = Spline(list1, {spline_order}, {weight_expr})")
    else:
        lines.append("spl = Spline(list1)")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Parametric
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CubicCoefficients:
    """Power-basis cubic ``a*s^3 + b*s^2 + c*s + d`` on ``s`` in [0, 1]."""

    a: float
    b: float
    c: float
    d: float


def hermite_to_power_basis(p0: float, p1: float, m0: float, m1: float) -> CubicCoefficients:
    return CubicCoefficients(
        a=2 * p0 - 2 * p1 + m0 + m1,
        b=-3 * p0 + 3 * p1 - 2 * m0 - m1,
        c=m0,
        d=p0,
    )


@dataclass(frozen=True)
class ParametricPiece:
    """One branch of the piecewise parametric curve.

    ``upper`` is the global parameter bound ``(index + 1) / count`` below
    which this piece applies; it is ``None`` for the last piece, which is
    the final else-branch.
    """

    index: int
    count: int
    upper: Optional[float]
    x: CubicCoefficients
    y: CubicCoefficients


def build_parametric_pieces(segments: List[Segment]) -> List[ParametricPiece]:
    count = len(segments)
    pieces: List[ParametricPiece] = []
    for seg in segments:
        i = seg.index
        pieces.append(
            ParametricPiece(
                index=i,
                count=count,
                upper=(i + 1) / count if i < count - 1 else None,
                x=hermite_to_power_basis(seg.p0[0], seg.p1[0], seg.m0[0], seg.m1[0]),
                y=hermite_to_power_basis(seg.p0[1], seg.p1[1], seg.m0[1], seg.m1[1]),
            )
        )
    return pieces


def _cubic_expression(coefs: CubicCoefficients, s: str, decimals: int) -> str:
    fmt = lambda v: format_number(v, decimals)  # noqa: E731
    return (
        f"{fmt(coefs.a)}*({s})^3 + {fmt(coefs.b)}*({s})^2 + "
        f"{fmt(coefs.c)}*({s}) + {fmt(coefs.d)}"
    )


def compose_piecewise(
    pieces: List[ParametricPiece],
    axis: str,
    decimals: int = PARAMETRIC_DECIMALS,
) -> str:
    """Compose the nested ``If(...)`` expression for one coordinate axis."""
    parts: List[str] = []
    for piece in pieces:
        s = f"( {piece.count} * t - {piece.index} )"
        expr = _cubic_expression(piece.x if axis == "x" else piece.y, s, decimals)
        if piece.upper is None:
            parts.append(expr)
        else:
            parts.append(f"If((t < {format_number(piece.upper, decimals)}), {expr}, ")
    opened = sum(1 for piece in pieces if piece.upper is not None)
    return "".join(parts) + ")" * opened


def make_parametric_curve(model: CurveModel, decimals: int = PARAMETRIC_DECIMALS) -> str:
    """Build ``Curve( x(t), y(t), t, 0, 1 )`` from the Hermite segments.

    Returns a placeholder comment when fewer than two points exist.
    """
    segments = model.segments()
    if not segments:
        return INSUFFICIENT_POINTS_MESSAGE
    pieces = build_parametric_pieces(segments)
    x_expr = compose_piecewise(pieces, "x", decimals)
    y_expr = compose_piecewise(pieces, "y", decimals)
    return f"Curve( {x_expr}, {y_expr}, t, 0, 1 )"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def make_csv(model: CurveModel, samples_per_segment: Any = DEFAULT_SAMPLES_PER_SEGMENT) -> str:
    """Return the sampled curve as CSV with an ``x,y`` header.

    Values are written with full float precision.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["x", "y"])
    for x, y in sample_curve_points(model, samples_per_segment):
        writer.writerow([repr(x), repr(y)])
    return output.getvalue()


def export_summary(model: CurveModel) -> Tuple[int, int]:
    """Return ``(points, segments)`` for logging."""
    n = len(model)
    return n, max(0, n - 1)
