"""
Editing session: one curve model plus its settings.

The session is the boundary between the input layer and the curve core.
It applies grid snapping to every coordinate the user writes (adding or
dragging a point, dragging a handle, typing into the points table),
clamps manual handles as they are edited, answers hit tests, and builds
the snapshot the rendering layer draws from.

Every operation addressed at an unknown point id is a silent no-op.
"""

from __future__ import annotations

import logging
import math
import uuid
from typing import Any, List, Optional, Tuple

from ..api.models import (
    EditorSettings,
    PointView,
    SnapshotResponse,
    Trace,
)
from .clipboard import MemoryClipboard
from .config import (
    HANDLE_TOLERANCE,
    POINT_TOLERANCE,
    PREVIEW_COARSE_STEPS,
    PREVIEW_SMOOTH_STEPS,
)
from .curve_model import CurveModel, ManualTangent
from .exporters import (
    make_csv,
    make_parametric_curve,
    make_polyline_command,
    make_spline_command,
)
from .grid_snap import finite_or, sanitize_grid_step, snap_if_enabled
from .hermite import ZERO, Vec, add, length, sub
from .picking import Pick, find_nearest
from .tangents import clamp_tangent

logger = logging.getLogger(__name__)


class EditorSession:
    """State of one interactive editing session."""

    def __init__(self, settings: Optional[EditorSettings] = None, session_id: Optional[str] = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.settings = settings or EditorSettings()
        self.model = CurveModel(tension=self.settings.tension)
        self.clipboard = MemoryClipboard()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def update_settings(self, **changes: Any) -> EditorSettings:
        """Apply a partial settings update.  ``None`` values are ignored."""
        data = self.settings.model_dump()
        data.update({k: v for k, v in changes.items() if v is not None and k in data})
        self.settings = EditorSettings(**data)
        self.model.tension = self.settings.tension
        return self.settings

    @property
    def grid_step(self) -> float:
        return sanitize_grid_step(self.settings.gridStep)

    def _snap(self, p: Vec, bypass: bool = False) -> Vec:
        return snap_if_enabled(p, self.settings.snapEnabled, self.grid_step, bypass)

    # ------------------------------------------------------------------
    # Point edits
    # ------------------------------------------------------------------

    def add_point(self, x: Any, y: Any, bypass_snap: bool = False) -> int:
        sx, sy = self._snap((finite_or(x, 0.0), finite_or(y, 0.0)), bypass_snap)
        return self.model.add_point(sx, sy)

    def drag_point(self, point_id: int, x: Any, y: Any, bypass_snap: bool = False) -> bool:
        if point_id not in self.model:
            return False
        sx, sy = self._snap((finite_or(x, 0.0), finite_or(y, 0.0)), bypass_snap)
        return self.model.move_point(point_id, sx, sy)

    def edit_coordinate(self, point_id: int, x: Any = None, y: Any = None) -> bool:
        """Typed edit of one or both coordinates.  Blank input counts as 0."""
        point = self.model.get_point(point_id)
        if point is None:
            return False
        nx = point.x if x is None else finite_or(x, 0.0)
        ny = point.y if y is None else finite_or(y, 0.0)
        sx, sy = self._snap((nx, ny))
        # Only the edited coordinate is snapped.
        if x is None:
            sx = point.x
        if y is None:
            sy = point.y
        return self.model.move_point(point_id, sx, sy)

    def delete_point(self, point_id: int) -> bool:
        return self.model.delete_point(point_id)

    def reset(self) -> None:
        self.model.clear()
        logger.info("session %s reset", self.session_id)

    # ------------------------------------------------------------------
    # Tangent edits
    # ------------------------------------------------------------------

    def set_manual_tangent(self, point_id: int, tx: Any, ty: Any) -> bool:
        return self.model.set_manual_tangent(point_id, finite_or(tx, 0.0), finite_or(ty, 0.0))

    def clear_tangent(self, point_id: int) -> bool:
        return self.model.clear_tangent(point_id)

    def set_manual(self, point_id: int, enabled: bool) -> bool:
        """Toggle a point between manual and auto tangents.

        Enabling seeds the manual value from the current auto tangent.
        """
        if enabled:
            return self.model.enable_manual(point_id)
        return self.model.clear_tangent(point_id)

    def _clamp_for(self, point_id: int, h: Vec) -> Vec:
        point = self.model.get_point(point_id)
        left, right = self.model.neighbours(point_id)
        return clamp_tangent(
            point.position,
            left.position if left else None,
            right.position if right else None,
            h,
        )

    def _store_handle(self, point_id: int, h: Vec, bypass_snap: bool = False) -> bool:
        # Snap the handle endpoint, not the vector.
        point = self.model.get_point(point_id)
        endpoint = self._snap(add(point.position, h), bypass_snap)
        tx, ty = sub(endpoint, point.position)
        return self.model.set_manual_tangent(point_id, tx, ty)

    def drag_handle(self, point_id: int, x: Any, y: Any, bypass_snap: bool = False) -> bool:
        """Move the handle of a point so its endpoint follows the pointer."""
        point = self.model.get_point(point_id)
        if point is None:
            return False
        target = self._snap((finite_or(x, 0.0), finite_or(y, 0.0)), bypass_snap)
        h = self._clamp_for(point_id, sub(target, point.position))
        return self.model.set_manual_tangent(point_id, h[0], h[1])

    def edit_tangent(
        self,
        point_id: int,
        tx: Any = None,
        ty: Any = None,
        angle_deg: Any = None,
        magnitude: Any = None,
    ) -> bool:
        """Typed edit of a tangent field from the points table.

        The point switches to a manual tangent seeded from its auto value
        first.  Cartesian fields replace one component; ``angle_deg`` keeps
        the current magnitude and ``magnitude`` keeps the current angle.
        The result is clamped and its endpoint snapped.  An edit that names
        no field changes nothing.
        """
        if tx is None and ty is None and angle_deg is None and magnitude is None:
            return False
        if not self.model.enable_manual(point_id):
            return False
        point = self.model.get_point(point_id)
        cur = point.tangent.vector if isinstance(point.tangent, ManualTangent) else ZERO
        h = cur
        if tx is not None or ty is not None:
            h = (
                cur[0] if tx is None else finite_or(tx, 0.0),
                cur[1] if ty is None else finite_or(ty, 0.0),
            )
        elif angle_deg is not None:
            mag = length(cur)
            angle = math.radians(finite_or(angle_deg, 0.0))
            h = (mag * math.cos(angle), mag * math.sin(angle))
        elif magnitude is not None:
            angle = math.atan2(cur[1], cur[0])
            mag = finite_or(magnitude, 0.0)
            h = (mag * math.cos(angle), mag * math.sin(angle))
        return self._store_handle(point_id, self._clamp_for(point_id, h))

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def _handle_endpoints(self) -> List[Tuple[int, Vec]]:
        tangents = self.model.clamped_tangents()
        return [(p.id, add(p.position, tangents[p.id])) for p in self.model.sorted_points()]

    def hit_test_point(self, coord: Vec, tolerance: float = POINT_TOLERANCE) -> Optional[Pick]:
        candidates = [(p.id, p.position) for p in self.model.sorted_points()]
        return find_nearest(candidates, coord, tolerance)

    def hit_test_handle(self, coord: Vec, tolerance: float = HANDLE_TOLERANCE) -> Optional[Pick]:
        return find_nearest(self._handle_endpoints(), coord, tolerance)

    def delete_at(
        self,
        coord: Vec,
        point_tolerance: float = POINT_TOLERANCE,
        handle_tolerance: float = HANDLE_TOLERANCE,
    ) -> Tuple[str, Optional[int]]:
        """Delete the point under ``coord``, or clear the handle under it.

        Handles are only considered while they are visible.  Returns the
        action taken and the id it applied to.
        """
        pick = self.hit_test_point(coord, point_tolerance)
        if pick is not None:
            self.model.delete_point(pick.id)
            return "deletedPoint", pick.id
        if self.settings.showHandles:
            pick = self.hit_test_handle(coord, handle_tolerance)
            if pick is not None:
                self.model.clear_tangent(pick.id)
                return "clearedHandle", pick.id
        return "none", None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def preview_steps(self) -> int:
        return PREVIEW_SMOOTH_STEPS if self.settings.smoothPreview else PREVIEW_COARSE_STEPS

    def snapshot(self) -> SnapshotResponse:
        """Build everything the rendering layer needs to redraw."""
        ordered = self.model.sorted_points()
        tangents = self.model.clamped_tangents()
        rows: List[PointView] = []
        for idx, p in enumerate(ordered):
            tx, ty = tangents[p.id]
            rows.append(
                PointView(
                    index=idx + 1,
                    id=p.id,
                    x=p.x,
                    y=p.y,
                    manual=p.is_manual,
                    tx=tx,
                    ty=ty,
                    angleDeg=math.degrees(math.atan2(ty, tx)),
                    magnitude=math.hypot(tx, ty),
                    handleX=p.x + tx,
                    handleY=p.y + ty,
                )
            )

        curve = self.model.curve_polyline(self.preview_steps())
        visible = self.settings.showHandles
        handles = Trace()
        links = Trace()
        if visible:
            for row in rows:
                handles.x.append(row.handleX)
                handles.y.append(row.handleY)
                links.x.extend([row.x, row.handleX, None])
                links.y.extend([row.y, row.handleY, None])

        return SnapshotResponse(
            sessionId=self.session_id,
            points=rows,
            curve=Trace(x=[c[0] for c in curve], y=[c[1] for c in curve]),
            markers=Trace(x=[p.x for p in ordered], y=[p.y for p in ordered]),
            handles=handles,
            handleLinks=links,
            handlesVisible=visible,
            gridTick=self.grid_step,
            settings=self.settings,
        )

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    def export_polyline(self, samples_per_segment: Any = None) -> str:
        return make_polyline_command(self.model, samples_per_segment or self.settings.samplesPerSegment)

    def export_spline(self, order: Any = None, weight: Any = None) -> str:
        return make_spline_command(
            self.model,
            order if order is not None else self.settings.splineOrder,
            weight if weight is not None else self.settings.splineWeight,
        )

    def export_parametric(self) -> str:
        return make_parametric_curve(self.model)

    def export_csv(self, samples_per_segment: Any = None) -> str:
        return make_csv(self.model, samples_per_segment or self.settings.samplesPerSegment)
