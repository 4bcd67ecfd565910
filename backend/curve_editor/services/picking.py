"""
Nearest-candidate lookups for pointer hit testing.

Coordinates and tolerances are in model units; converting from device
pixels is the job of the rendering layer.  Candidates are scanned in
sorted curve order and only a strictly closer candidate replaces the
current best, so the first of several equidistant candidates wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .hermite import Vec, distance


@dataclass(frozen=True)
class Pick:
    """Result of a successful hit test."""

    id: int
    distance: float


def find_nearest(
    candidates: Iterable[Tuple[int, Vec]],
    coord: Vec,
    tolerance: float,
) -> Optional[Pick]:
    """Return the candidate nearest to ``coord`` if it lies within ``tolerance``."""
    best: Optional[Pick] = None
    for cid, pos in candidates:
        d = distance(coord, pos)
        if best is None or d < best.distance:
            best = Pick(cid, d)
    if best is not None and best.distance <= tolerance:
        return best
    return None
