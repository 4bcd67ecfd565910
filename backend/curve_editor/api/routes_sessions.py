"""
Routes for editing-session lifecycle, settings, snapshots and picking.

A session owns one curve and its settings.  Sessions live in an
in-memory registry keyed by ``sessionId``; nothing is persisted, so a
server restart starts from an empty registry.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Response

from .models import (
    DeleteAtResponse,
    CoordinateRequest,
    EditorSettings,
    PickResponse,
    SessionInfo,
    SettingsUpdate,
    SnapshotResponse,
)
from ..services.config import HANDLE_TOLERANCE, POINT_TOLERANCE
from ..services.editor_session import EditorSession
from ..services.grid_snap import finite_or

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory registry of editing sessions keyed by sessionId.
session_registry: Dict[str, EditorSession] = {}


def get_session(session_id: str) -> EditorSession:
    """Return the session for ``session_id`` or raise a 404."""
    session = session_registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/sessions", response_model=SessionInfo, status_code=201)
async def create_session(settings: Optional[EditorSettings] = None) -> SessionInfo:
    """Create an empty editing session, optionally with initial settings."""
    session = EditorSession(settings=settings)
    session_registry[session.session_id] = session
    logger.info("created session %s", session.session_id)
    return SessionInfo(sessionId=session.session_id, settings=session.settings)


@router.get("/sessions/{session_id}", response_model=SnapshotResponse)
async def get_snapshot(session_id: str) -> SnapshotResponse:
    """Return the sorted points, resolved tangents and preview curve."""
    return get_session(session_id).snapshot()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str) -> Response:
    get_session(session_id)
    session_registry.pop(session_id, None)
    logger.info("deleted session %s", session_id)
    return Response(status_code=204)


@router.get("/sessions/{session_id}/settings", response_model=EditorSettings)
async def get_settings(session_id: str) -> EditorSettings:
    return get_session(session_id).settings


@router.patch("/sessions/{session_id}/settings", response_model=EditorSettings)
async def update_settings(session_id: str, body: SettingsUpdate) -> EditorSettings:
    """Update some settings.  Invalid values fall back to their defaults."""
    session = get_session(session_id)
    return session.update_settings(**body.model_dump())


def _pick_response(pick, tolerance: float) -> PickResponse:
    if pick is None:
        return PickResponse(hit=False, tolerance=tolerance)
    return PickResponse(hit=True, id=pick.id, distance=pick.distance, tolerance=tolerance)


# Query values arrive as raw strings and are parsed with fallbacks, so a
# half-typed coordinate never produces a 422.
def _tolerance(raw: Optional[str], default: float) -> float:
    tol = finite_or(raw, default)
    return tol if tol >= 0 else default


@router.get("/sessions/{session_id}/hit/point", response_model=PickResponse)
async def hit_test_point(
    session_id: str,
    x: Optional[str] = Query(None, description="X coordinate in model units"),
    y: Optional[str] = Query(None, description="Y coordinate in model units"),
    tolerance: Optional[str] = Query(None, description="Pick radius in model units"),
) -> PickResponse:
    """Return the nearest control point within ``tolerance``, if any."""
    session = get_session(session_id)
    tol = _tolerance(tolerance, POINT_TOLERANCE)
    coord = (finite_or(x, 0.0), finite_or(y, 0.0))
    return _pick_response(session.hit_test_point(coord, tol), tol)


@router.get("/sessions/{session_id}/hit/handle", response_model=PickResponse)
async def hit_test_handle(
    session_id: str,
    x: Optional[str] = Query(None, description="X coordinate in model units"),
    y: Optional[str] = Query(None, description="Y coordinate in model units"),
    tolerance: Optional[str] = Query(None, description="Pick radius in model units"),
) -> PickResponse:
    """Return the point whose tangent handle is nearest, within ``tolerance``."""
    session = get_session(session_id)
    tol = _tolerance(tolerance, HANDLE_TOLERANCE)
    coord = (finite_or(x, 0.0), finite_or(y, 0.0))
    return _pick_response(session.hit_test_handle(coord, tol), tol)


@router.post("/sessions/{session_id}/delete-at", response_model=DeleteAtResponse)
async def delete_at(session_id: str, body: CoordinateRequest) -> DeleteAtResponse:
    """Delete the point under the pointer, or clear the handle under it."""
    session = get_session(session_id)
    action, point_id = session.delete_at((body.x, body.y))
    logger.debug("delete-at (%s, %s) in %s: %s %s", body.x, body.y, session_id, action, point_id)
    return DeleteAtResponse(action=action, id=point_id, snapshot=session.snapshot())
