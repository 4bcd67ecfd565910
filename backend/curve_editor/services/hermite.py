"""
Vector arithmetic and cubic Hermite evaluation.

Vectors are plain ``(x, y)`` tuples.  Everything in this module is a pure
function of its arguments; the only failure mode is an explicit
:class:`InvalidArgument` when a caller asks for a non-positive number of
samples.
"""

from __future__ import annotations

import math
from typing import List, Tuple

import numpy as np

Vec = Tuple[float, float]

ZERO: Vec = (0.0, 0.0)


class InvalidArgument(ValueError):
    """Raised when a math routine is called with a violated precondition."""


def add(a: Vec, b: Vec) -> Vec:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec, b: Vec) -> Vec:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Vec, s: float) -> Vec:
    return (a[0] * s, a[1] * s)


def length(a: Vec) -> float:
    return math.hypot(a[0], a[1])


def distance(a: Vec, b: Vec) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


# Cubic Hermite basis functions on t in [0, 1].

def h00(t: float) -> float:
    return 2 * t * t * t - 3 * t * t + 1


def h10(t: float) -> float:
    return t * t * t - 2 * t * t + t


def h01(t: float) -> float:
    return -2 * t * t * t + 3 * t * t


def h11(t: float) -> float:
    return t * t * t - t * t


def sample_segment(p0: Vec, p1: Vec, m0: Vec, m1: Vec, steps: int) -> List[Vec]:
    """Sample a cubic Hermite segment at ``steps + 1`` evenly spaced parameters.

    The samples are taken at ``t = i / steps`` for ``i = 0..steps`` so the
    first sample is exactly ``p0`` and the last is exactly ``p1``.

    Args:
        p0: Start point of the segment.
        p1: End point of the segment.
        m0: Tangent at ``p0``.
        m1: Tangent at ``p1``.
        steps: Number of intervals; must be at least 1.

    Returns:
        A list of ``steps + 1`` ``(x, y)`` tuples.

    Raises:
        InvalidArgument: If ``steps`` is not an integer >= 1.
    """
    if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)) or steps < 1:
        raise InvalidArgument(f"steps must be an integer >= 1, got {steps!r}")
    t = np.arange(steps + 1, dtype=float) / steps
    # The basis functions are plain polynomials, so they evaluate element-wise.
    basis = np.stack([h00(t), h10(t), h01(t), h11(t)], axis=1)
    control = np.array([p0, m0, p1, m1], dtype=float)
    samples = basis @ control
    # Pin the endpoints so adjacent segments join without rounding drift.
    samples[0] = p0
    samples[-1] = p1
    return [(float(x), float(y)) for x, y in samples]
