"""
Concentration statistics over stake values: Gini, Nakamoto, top-N share.

Pure functions. Every input maps to a defined output: non-positive,
non-finite and non-numeric entries are dropped before any arithmetic,
and empty inputs return 0.
"""

from __future__ import annotations

import math
from typing import Iterable

# Share of total stake that counts as control for the Nakamoto coefficient
NAKAMOTO_CONTROL_THRESHOLD = 0.51


def positive_values(values: Iterable) -> list[float]:
    """Return the finite, strictly positive entries of values as floats."""
    out: list[float] = []
    for v in values or ():
        if isinstance(v, bool):
            continue
        try:
            f = float(v)
        except (TypeError, ValueError, OverflowError):
            continue
        if math.isfinite(f) and f > 0:
            out.append(f)
    return out


def gini(values: Iterable) -> float:
    """
    Gini coefficient via the relative mean absolute difference:

        G = (sum_i sum_j |x_i - x_j|) / (2 * n^2 * mean)

    0 = perfect equality, 1 = one holder has everything. Returns 0 for fewer
    than two positive values (no inequality to measure). Clamped to [0, 1].

    >>> gini([100, 100, 100])
    0.0
    >>> gini([0, 0, 300])
    0.0
    """
    xs = positive_values(values)
    n = len(xs)
    if n < 2:
        return 0.0
    mean = sum(xs) / n
    if mean == 0:
        return 0.0
    # Position lists are capped upstream (30 per vault), so the O(n^2) pair sum is fine.
    sum_differences = sum(abs(xi - xj) for xi in xs for xj in xs)
    g = sum_differences / (2 * n * n * mean)
    return max(0.0, min(1.0, g))


def nakamoto(values: Iterable) -> int:
    """
    Minimum number of top stakers whose combined stake reaches 51% of the total.

    >>> nakamoto([90, 5, 5])
    1
    >>> nakamoto([30, 25, 25, 20])
    2
    """
    xs = positive_values(values)
    if not xs:
        return 0
    threshold = sum(xs) * NAKAMOTO_CONTROL_THRESHOLD
    xs.sort(reverse=True)
    cumulative = 0.0
    for i, x in enumerate(xs):
        cumulative += x
        if cumulative >= threshold:
            return i + 1
    return len(xs)


def top_n_percent(values: Iterable, n: int) -> float:
    """Percentage (0-100) of total stake held by the n largest stakers."""
    xs = positive_values(values)
    if not xs or n <= 0:
        return 0.0
    total = sum(xs)
    if total == 0:
        return 0.0
    xs.sort(reverse=True)
    return sum(xs[:n]) / total * 100
