"""
Defaults and tunables for the curve editor.

Values here are plain module-level constants so that both the services
and the API layer can import them without pulling in FastAPI.  A small
number of switches can be flipped from the environment; at present only
``CURVE_DEBUG`` is read, which enables verbose logging of every curve
re-sampling.
"""

from __future__ import annotations

import os

# Fallback grid step used whenever a configured step is not a positive,
# finite number.
DEFAULT_GRID_STEP: float = 0.5

# Tension of the auto tangents.  0.0 gives Catmull-Rom tangents, 1.0
# collapses every auto tangent to zero.
DEFAULT_TENSION: float = 0.0

# Samples per segment used by the polyline and CSV exports.
DEFAULT_SAMPLES_PER_SEGMENT: int = 48
MIN_EXPORT_SAMPLES_PER_SEGMENT: int = 2
# Larger requests are clamped to this to bound the size of an export.
MAX_SAMPLES_PER_SEGMENT: int = 5000

# Preview sampling for the on-screen curve.  When smoothing is turned off
# each segment is drawn from just three samples.
PREVIEW_SMOOTH_STEPS: int = 48
PREVIEW_COARSE_STEPS: int = 2

# Tangent magnitude is capped at HANDLE_CLAMP_FACTOR times the chord to
# the reference neighbour, but never below HANDLE_CLAMP_FLOOR.
HANDLE_CLAMP_FACTOR: float = 1.5
HANDLE_CLAMP_FLOOR: float = 1e-4

# Picking tolerances in model units.
POINT_TOLERANCE: float = 0.4
HANDLE_TOLERANCE: float = 0.5

# Decimal places used by the exporters.
LIST_LITERAL_DECIMALS: int = 6
PARAMETRIC_DECIMALS: int = 8

# Smallest spline order forwarded to the Spline command.
MIN_SPLINE_ORDER: int = 3

CSV_FILENAME: str = "curve_points.csv"


def curve_debug_enabled() -> bool:
    """Return True when ``CURVE_DEBUG`` is set in the environment."""
    return bool(os.getenv("CURVE_DEBUG"))
