"""
Routes for point and tangent edits.

Coordinates arrive already converted to model units by the client.
Requests naming a point id that no longer exists succeed without
changing anything and return the current snapshot, since a client may
send an edit for a point it has just deleted.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from .models import (
    CoordinateEdit,
    CoordinateRequest,
    ManualToggle,
    SnapshotResponse,
    TangentEdit,
    TangentRequest,
    TangentResponse,
)
from .routes_sessions import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sessions/{session_id}/points", response_model=SnapshotResponse, status_code=201)
async def add_point(session_id: str, body: CoordinateRequest) -> SnapshotResponse:
    """Add a point, snapping it to the grid unless bypassed."""
    session = get_session(session_id)
    point_id = session.add_point(body.x, body.y, body.bypassSnap)
    logger.debug("session %s: added point %d", session_id, point_id)
    return session.snapshot()


@router.delete("/sessions/{session_id}/points", response_model=SnapshotResponse)
async def reset_points(session_id: str) -> SnapshotResponse:
    """Remove every point from the session."""
    session = get_session(session_id)
    session.reset()
    return session.snapshot()


@router.put("/sessions/{session_id}/points/{point_id}", response_model=SnapshotResponse)
async def drag_point(session_id: str, point_id: int, body: CoordinateRequest) -> SnapshotResponse:
    """Move a point to the pointer position."""
    session = get_session(session_id)
    session.drag_point(point_id, body.x, body.y, body.bypassSnap)
    return session.snapshot()


@router.patch("/sessions/{session_id}/points/{point_id}", response_model=SnapshotResponse)
async def edit_point(session_id: str, point_id: int, body: CoordinateEdit) -> SnapshotResponse:
    """Apply a typed edit to the x and/or y field of a point."""
    session = get_session(session_id)
    session.edit_coordinate(point_id, x=body.x, y=body.y)
    return session.snapshot()


@router.delete("/sessions/{session_id}/points/{point_id}", response_model=SnapshotResponse)
async def delete_point(session_id: str, point_id: int) -> SnapshotResponse:
    session = get_session(session_id)
    session.delete_point(point_id)
    return session.snapshot()


@router.get("/sessions/{session_id}/points/{point_id}/tangent", response_model=TangentResponse)
async def get_tangent(session_id: str, point_id: int) -> TangentResponse:
    """Return the resolved tangent of a point and its clamped form.

    An unknown point id yields a zero, automatic tangent.
    """
    session = get_session(session_id)
    model = session.model
    point = model.get_point(point_id)
    tx, ty = model.resolved_tangent(point_id) or (0.0, 0.0)
    ctx, cty = model.clamped_tangent(point_id) or (0.0, 0.0)
    return TangentResponse(
        id=point_id,
        manual=bool(point and point.is_manual),
        tx=tx,
        ty=ty,
        clampedTx=ctx,
        clampedTy=cty,
    )


@router.put("/sessions/{session_id}/points/{point_id}/tangent", response_model=SnapshotResponse)
async def set_tangent(session_id: str, point_id: int, body: TangentRequest) -> SnapshotResponse:
    """Set an absolute manual tangent vector."""
    session = get_session(session_id)
    session.set_manual_tangent(point_id, body.tx, body.ty)
    return session.snapshot()


@router.patch("/sessions/{session_id}/points/{point_id}/tangent", response_model=SnapshotResponse)
async def edit_tangent(session_id: str, point_id: int, body: TangentEdit) -> SnapshotResponse:
    """Apply a typed edit to one tangent field (tx, ty, angleDeg or magnitude)."""
    session = get_session(session_id)
    session.edit_tangent(
        point_id,
        tx=body.tx,
        ty=body.ty,
        angle_deg=body.angleDeg,
        magnitude=body.magnitude,
    )
    return session.snapshot()


@router.delete("/sessions/{session_id}/points/{point_id}/tangent", response_model=SnapshotResponse)
async def clear_tangent(session_id: str, point_id: int) -> SnapshotResponse:
    """Revert a point to its automatic tangent."""
    session = get_session(session_id)
    session.clear_tangent(point_id)
    return session.snapshot()


@router.post(
    "/sessions/{session_id}/points/{point_id}/tangent/manual",
    response_model=SnapshotResponse,
)
async def toggle_manual(session_id: str, point_id: int, body: ManualToggle) -> SnapshotResponse:
    """Switch a point between manual and automatic tangents.

    Enabling freezes the current auto tangent as the manual value.
    """
    session = get_session(session_id)
    session.set_manual(point_id, body.enabled)
    return session.snapshot()


@router.put("/sessions/{session_id}/points/{point_id}/handle", response_model=SnapshotResponse)
async def drag_handle(session_id: str, point_id: int, body: CoordinateRequest) -> SnapshotResponse:
    """Drag the tangent handle of a point to the pointer position."""
    session = get_session(session_id)
    session.drag_handle(point_id, body.x, body.y, body.bypassSnap)
    return session.snapshot()
