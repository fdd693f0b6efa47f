"""Numeric closeness comparators used by ``linear:`` and ``gaussian:`` scorers.

Both take ``(l, r, min, ref, max)``. The tolerated distance is always the
upper half-width ``max - ref``, whichever side of ``l`` the value ``r`` falls
on; ``min`` is accepted for symmetry with the scorer syntax but unused.
"""

from __future__ import annotations
import math


def linear_range(l: float, r: float, min: float, ref: float, max: float) -> float:
    """Score 1 for an exact match, falling linearly to 0 at ``max - ref`` away."""
    dist = abs(r - l)
    if dist == 0:
        return 1
    maxdist = max - ref
    if dist > maxdist:
        return 0
    return 1 - dist / maxdist


def gaussian_range(l: float, r: float, min: float, ref: float, max: float) -> float:
    """Reshape :func:`linear_range` into a steep curve favouring near matches.

    1.0 at a perfect match, about 0.05 when the linear score is 0.
    """
    linear = linear_range(l, r, min, ref, max)
    return round(math.exp(-(linear - 1) ** 2) ** 3, 3)


__all__ = ["linear_range", "gaussian_range"]
