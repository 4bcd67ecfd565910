"""
Point/curve model.

:class:`CurveModel` owns the control points of one curve together with
the id counter used to name them.  The curve itself is never stored: the
sorted point order, the auto tangents, the clamped segment tangents and
the sampled polyline are all re-derived from the current points on every
call, so there is no cached state that could go stale after an edit.

Operations addressed at an unknown point id are silent no-ops.  They
return ``False`` (or ``None`` for reads) so callers can tell, but they
never raise, because an interactive client may race a stale id against
a concurrent delete.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple, Union

from .config import DEFAULT_TENSION, curve_debug_enabled
from .grid_snap import finite_or
from .hermite import ZERO, Vec, sample_segment
from .tangents import clamp_tangent, clamp_tension, compute_auto_tangents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoTangent:
    """Tangent derived from the neighbouring points."""


@dataclass(frozen=True)
class ManualTangent:
    """Tangent fixed by the user as an absolute vector."""

    tx: float
    ty: float

    @property
    def vector(self) -> Vec:
        return (self.tx, self.ty)


TangentMode = Union[AutoTangent, ManualTangent]

AUTO = AutoTangent()


@dataclass(frozen=True)
class ControlPoint:
    """Read-only view of a control point."""

    id: int
    x: float
    y: float
    tangent: TangentMode = field(default=AUTO)

    @property
    def position(self) -> Vec:
        return (self.x, self.y)

    @property
    def is_manual(self) -> bool:
        return isinstance(self.tangent, ManualTangent)


@dataclass(frozen=True)
class Segment:
    """One Hermite segment between two consecutive sorted points."""

    index: int
    p0: Vec
    p1: Vec
    m0: Vec
    m1: Vec

    def sample(self, steps: int) -> List[Vec]:
        return sample_segment(self.p0, self.p1, self.m0, self.m1, steps)


class CurveModel:
    """Ordered collection of control points with optional manual tangents."""

    def __init__(self, tension: float = DEFAULT_TENSION) -> None:
        self._points: Dict[int, ControlPoint] = {}
        self._next_id: int = 1
        self.tension = tension

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def tension(self) -> float:
        return self._tension

    @tension.setter
    def tension(self, value: float) -> None:
        self._tension = clamp_tension(finite_or(value, DEFAULT_TENSION))

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, point_id: object) -> bool:
        return point_id in self._points

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_point(self, x: float, y: float) -> int:
        """Append a new automatic-tangent point and return its id."""
        point_id = self._next_id
        self._next_id += 1
        self._points[point_id] = ControlPoint(point_id, finite_or(x, 0.0), finite_or(y, 0.0))
        logger.debug("added point %d at (%s, %s)", point_id, x, y)
        return point_id

    def move_point(self, point_id: int, x: float, y: float) -> bool:
        """Update the position of a point; its tangent mode is unchanged."""
        point = self._points.get(point_id)
        if point is None:
            return False
        self._points[point_id] = replace(point, x=finite_or(x, 0.0), y=finite_or(y, 0.0))
        return True

    def delete_point(self, point_id: int) -> bool:
        """Remove a point.  Manual tangents on its neighbours are left as-is."""
        if self._points.pop(point_id, None) is None:
            return False
        logger.debug("deleted point %d", point_id)
        return True

    def set_manual_tangent(self, point_id: int, tx: float, ty: float) -> bool:
        point = self._points.get(point_id)
        if point is None:
            return False
        tangent = ManualTangent(finite_or(tx, 0.0), finite_or(ty, 0.0))
        self._points[point_id] = replace(point, tangent=tangent)
        return True

    def clear_tangent(self, point_id: int) -> bool:
        """Revert a point to its auto tangent."""
        point = self._points.get(point_id)
        if point is None:
            return False
        if point.is_manual:
            self._points[point_id] = replace(point, tangent=AUTO)
        return True

    def enable_manual(self, point_id: int) -> bool:
        """Freeze the current auto tangent of a point as its manual tangent.

        A point that is already manual keeps its value.
        """
        point = self._points.get(point_id)
        if point is None:
            return False
        if not point.is_manual:
            tx, ty = self.auto_tangents().get(point_id, ZERO)
            self._points[point_id] = replace(point, tangent=ManualTangent(tx, ty))
        return True

    def clear(self) -> None:
        """Remove every point.  Ids already handed out are not reused."""
        self._points.clear()

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def get_point(self, point_id: int) -> Optional[ControlPoint]:
        return self._points.get(point_id)

    def points(self) -> List[ControlPoint]:
        """Return the points in creation order."""
        return list(self._points.values())

    def sorted_points(self) -> List[ControlPoint]:
        """Return the points sorted by x, ties broken by id."""
        return sorted(self._points.values(), key=lambda p: (p.x, p.id))

    def auto_tangents(self) -> Dict[int, Vec]:
        ordered = [(p.id, p.position) for p in self.sorted_points()]
        return compute_auto_tangents(ordered, self._tension)

    def neighbours(self, point_id: int) -> Tuple[Optional[ControlPoint], Optional[ControlPoint]]:
        """Return the left and right neighbours of a point in sorted order."""
        ordered = self.sorted_points()
        for i, p in enumerate(ordered):
            if p.id == point_id:
                left = ordered[i - 1] if i > 0 else None
                right = ordered[i + 1] if i + 1 < len(ordered) else None
                return left, right
        return None, None

    def resolved_tangent(self, point_id: int) -> Optional[Vec]:
        """Return the manual tangent of a point if set, else its auto tangent.

        The value is not clamped; see :meth:`clamped_tangent`.
        """
        point = self._points.get(point_id)
        if point is None:
            return None
        if isinstance(point.tangent, ManualTangent):
            return point.tangent.vector
        return self.auto_tangents().get(point_id, ZERO)

    def clamped_tangents(self) -> Dict[int, Vec]:
        """Return the clamped tangent of every point, keyed by id."""
        ordered = self.sorted_points()
        auto = compute_auto_tangents([(p.id, p.position) for p in ordered], self._tension)
        result: Dict[int, Vec] = {}
        for i, p in enumerate(ordered):
            if isinstance(p.tangent, ManualTangent):
                tangent = p.tangent.vector
            else:
                tangent = auto[p.id]
            left = ordered[i - 1].position if i > 0 else None
            right = ordered[i + 1].position if i + 1 < len(ordered) else None
            result[p.id] = clamp_tangent(p.position, left, right, tangent)
        return result

    def clamped_tangent(self, point_id: int) -> Optional[Vec]:
        if point_id not in self._points:
            return None
        return self.clamped_tangents()[point_id]

    def segments(self) -> List[Segment]:
        """Return the ``max(0, n - 1)`` segments of the curve."""
        ordered = self.sorted_points()
        tangents = self.clamped_tangents()
        return [
            Segment(
                index=i,
                p0=a.position,
                p1=b.position,
                m0=tangents[a.id],
                m1=tangents[b.id],
            )
            for i, (a, b) in enumerate(zip(ordered, ordered[1:]))
        ]

    def curve_polyline(self, samples_per_segment: int) -> List[Vec]:
        """Sample the whole curve into one joined polyline.

        Each segment is sampled at ``samples_per_segment + 1`` parameters
        and the first sample of every segment after the first is dropped,
        since it repeats the previous segment's last sample.  The result
        has ``1 + segments * samples_per_segment`` points, or none when the
        model holds fewer than two points.

        Raises:
            InvalidArgument: If ``samples_per_segment`` is below 1.
        """
        segments = self.segments()
        out: List[Vec] = []
        for seg in segments:
            samples = seg.sample(samples_per_segment)
            out.extend(samples if seg.index == 0 else samples[1:])
        if curve_debug_enabled():
            logger.debug(
                "sampled %d segments at %d steps into %d points",
                len(segments),
                samples_per_segment,
                len(out),
            )
        return out
