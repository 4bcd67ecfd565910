"""
Grid snapping and sanitising of numeric input.

Snapping is applied only where the input layer writes a coordinate into
the model: adding a point, dragging a point or a handle, or typing a
value into an editable field.  Curve sampling never snaps.
"""

from __future__ import annotations

import math
from typing import Any

from .config import DEFAULT_GRID_STEP
from .hermite import Vec


def finite_or(value: Any, fallback: float) -> float:
    """Return ``value`` as a finite float, or ``fallback`` if it is not one.

    Strings are parsed; blank strings, ``None``, booleans and anything that
    does not parse to a finite number yield ``fallback``.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def sanitize_grid_step(step: Any) -> float:
    """Return ``step`` if it is a positive finite number, else the default step."""
    value = finite_or(step, DEFAULT_GRID_STEP)
    return value if value > 0 else DEFAULT_GRID_STEP


def snap_value(v: float, step: float) -> float:
    q = v / step
    # Past float range the value is already far coarser than any grid.
    if not math.isfinite(q):
        return v
    # Round half up, the way the browser editor rounds.
    return math.floor(q + 0.5) * step


def snap_point(p: Vec, step: float) -> Vec:
    """Round both coordinates of ``p`` to the nearest multiple of ``step``."""
    step = sanitize_grid_step(step)
    return (snap_value(p[0], step), snap_value(p[1], step))


def snap_if_enabled(p: Vec, enabled: bool, step: float, bypass: bool = False) -> Vec:
    """Snap ``p`` when snapping is enabled and the caller did not bypass it."""
    if not enabled or bypass:
        return p
    return snap_point(p, step)
