"""
Tangent engine: auto tangents and handle magnitude clamping.

Auto tangents follow the cardinal-spline rule.  For a point with both
neighbours the tangent is ``(1 - tension) * (next - prev) / 2``; an end
point uses the one-sided difference to its single neighbour; a lone
point gets a zero tangent.  ``tension`` 0 gives Catmull-Rom tangents and
1 flattens every tangent to zero, which turns the curve into the
polyline through the points.

Any tangent, auto or manual, is clamped before it reaches a segment so a
handle dragged far away cannot produce large overshoot loops between
closely spaced points.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence, Tuple

from .config import HANDLE_CLAMP_FACTOR, HANDLE_CLAMP_FLOOR
from .hermite import ZERO, Vec, distance, length, scale, sub


def clamp_tension(tension: float) -> float:
    """Clip ``tension`` to ``[0, 1]``."""
    return min(1.0, max(0.0, tension))


def compute_auto_tangents(
    sorted_points: Sequence[Tuple[int, Vec]],
    tension: float,
) -> Dict[int, Vec]:
    """Compute the auto tangent of every point.

    Args:
        sorted_points: ``(id, (x, y))`` pairs already in curve order.
        tension: Tension in ``[0, 1]``; values outside are clipped.

    Returns:
        A mapping from point id to its auto tangent.
    """
    k = 1.0 - clamp_tension(tension)
    n = len(sorted_points)
    tangents: Dict[int, Vec] = {}
    for i, (pid, pos) in enumerate(sorted_points):
        if n == 1:
            tangent = ZERO
        elif i == 0:
            tangent = scale(sub(sorted_points[1][1], pos), k)
        elif i == n - 1:
            tangent = scale(sub(pos, sorted_points[i - 1][1]), k)
        else:
            prev_pos = sorted_points[i - 1][1]
            next_pos = sorted_points[i + 1][1]
            tangent = scale(sub(next_pos, prev_pos), 0.5 * k)
        tangents[pid] = tangent
    return tangents


def clamp_handle_magnitude(p0: Vec, p1: Vec, h: Vec) -> Vec:
    """Cap the magnitude of ``h`` relative to the chord ``p0 -> p1``.

    The direction of ``h`` is preserved; its length is limited to
    ``max(HANDLE_CLAMP_FLOOR, HANDLE_CLAMP_FACTOR * |p1 - p0|)``.
    """
    max_mag = max(HANDLE_CLAMP_FLOOR, HANDLE_CLAMP_FACTOR * distance(p0, p1))
    mag = length(h)
    if not math.isfinite(mag) or mag <= max_mag:
        return h
    return scale(h, max_mag / mag)


def clamp_reference(point: Vec, left: Optional[Vec], right: Optional[Vec]) -> Optional[Vec]:
    """Pick the neighbour a tangent at ``point`` is clamped against.

    With two neighbours the farther one wins (left on a tie).  With one
    neighbour that one is used.  An isolated point has no reference.
    """
    if left is not None and right is not None:
        return left if distance(point, left) >= distance(point, right) else right
    if left is not None:
        return left
    return right


def clamp_tangent(point: Vec, left: Optional[Vec], right: Optional[Vec], h: Vec) -> Vec:
    """Clamp ``h`` at ``point`` against its reference neighbour, if any."""
    ref = clamp_reference(point, left, right)
    if ref is None:
        return h
    return clamp_handle_magnitude(point, ref, h)
