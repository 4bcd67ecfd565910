"""
Routes for exporting the curve.

Each export is returned as plain text for the client to display, copy or
save.  Passing ``copy=true`` additionally copies the text into the
session clipboard once the response has been sent; a failed copy is
logged and otherwise ignored.

Numeric query parameters are accepted as strings and sanitised by the
exporters, so an unparsable ``samples`` or ``order`` falls back to its
default instead of being rejected.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Response

from .models import ClipboardResponse, CurveResponse
from .routes_sessions import get_session
from ..services.clipboard import copy_to_clipboard
from ..services.config import CSV_FILENAME
from ..services.editor_session import EditorSession
from ..services.exporters import export_summary, sanitize_samples_per_segment

logger = logging.getLogger(__name__)

router = APIRouter()


def _run_export(session: EditorSession, kind: str, build: Callable[[], str]) -> str:
    try:
        text = build()
    except Exception as exc:
        logger.exception("%s export failed for session %s: %s", kind, session.session_id, exc)
        raise HTTPException(status_code=500, detail=f"Failed to export {kind}: {exc}")
    n_points, n_segments = export_summary(session.model)
    logger.info(
        "exported %s for session %s (%d points, %d segments)",
        kind,
        session.session_id,
        n_points,
        n_segments,
    )
    return text


def _text_response(
    session: EditorSession,
    text: str,
    copy: bool,
    background_tasks: BackgroundTasks,
    media_type: str = "text/plain",
    headers: Optional[dict] = None,
) -> Response:
    if copy:
        background_tasks.add_task(copy_to_clipboard, session.clipboard, text)
    return Response(content=text, media_type=media_type, headers=headers)


@router.get("/sessions/{session_id}/curve", response_model=CurveResponse)
async def get_curve(
    session_id: str,
    samples: Optional[str] = Query(None, description="Samples per segment (>= 2)"),
) -> CurveResponse:
    """Return the sampled curve as a list of ``[x, y]`` pairs."""
    session = get_session(session_id)
    steps = sanitize_samples_per_segment(samples if samples is not None else session.settings.samplesPerSegment)
    points = session.model.curve_polyline(steps)
    return CurveResponse(samplesPerSegment=steps, points=[[x, y] for x, y in points])


@router.get("/sessions/{session_id}/export/polyline")
async def export_polyline(
    session_id: str,
    background_tasks: BackgroundTasks,
    samples: Optional[str] = Query(None, description="Samples per segment (>= 2)"),
    copy: bool = Query(False, description="Also copy the text to the session clipboard"),
) -> Response:
    """Export the sampled curve as a GeoGebra ``Polyline`` command."""
    session = get_session(session_id)
    text = _run_export(session, "polyline", lambda: session.export_polyline(samples))
    return _text_response(session, text, copy, background_tasks)


@router.get("/sessions/{session_id}/export/spline")
async def export_spline(
    session_id: str,
    background_tasks: BackgroundTasks,
    order: Optional[str] = Query(None, description="Spline order, used when it parses to an int >= 3"),
    weight: Optional[str] = Query(None, description="Weighting: 'default' or 'absx'"),
    copy: bool = Query(False, description="Also copy the text to the session clipboard"),
) -> Response:
    """Export the sorted control points as a GeoGebra ``Spline`` command."""
    session = get_session(session_id)
    text = _run_export(session, "spline", lambda: session.export_spline(order, weight))
    return _text_response(session, text, copy, background_tasks)


@router.get("/sessions/{session_id}/export/parametric")
async def export_parametric(
    session_id: str,
    background_tasks: BackgroundTasks,
    copy: bool = Query(False, description="Also copy the text to the session clipboard"),
) -> Response:
    """Export the curve as a piecewise cubic GeoGebra ``Curve`` command."""
    session = get_session(session_id)
    text = _run_export(session, "parametric", session.export_parametric)
    return _text_response(session, text, copy, background_tasks)


@router.get("/sessions/{session_id}/export/csv")
async def export_csv(
    session_id: str,
    background_tasks: BackgroundTasks,
    samples: Optional[str] = Query(None, description="Samples per segment (>= 2)"),
    copy: bool = Query(False, description="Also copy the text to the session clipboard"),
) -> Response:
    """Export the sampled curve as CSV with an ``x,y`` header."""
    session = get_session(session_id)
    text = _run_export(session, "csv", lambda: session.export_csv(samples))
    headers = {"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
    return _text_response(session, text, copy, background_tasks, media_type="text/csv", headers=headers)


@router.get("/sessions/{session_id}/clipboard", response_model=ClipboardResponse)
async def get_clipboard(session_id: str) -> ClipboardResponse:
    """Return the text most recently copied in this session."""
    return ClipboardResponse(text=get_session(session_id).clipboard.text)
