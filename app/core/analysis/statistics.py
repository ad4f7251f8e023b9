"""
Statistical Primitives — mean, median, population SD, Pearson r
=================================================================
Pure functions over plain sequences of numbers. Callers filter missing
values first; an empty sequence raises `EmptyInputError`.

Compatibility notes:
  - median() returns the LOWER-middle element for even lengths
    (median([1, 2, 3, 4]) == 2), never an interpolated value.
  - standard_deviation() divides by n (population SD).
  - pearson_correlation() returns exactly 0.0 when either input has zero
    variance instead of NaN.
"""

import math
from typing import Optional, Sequence

from .errors import EmptyInputError


def _require_values(values: Sequence[float], name: str) -> None:
    if len(values) == 0:
        raise EmptyInputError(f"{name}() requires at least one value")


def _is_constant(values: Sequence[float]) -> bool:
    first = values[0]
    return all(v == first for v in values)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean."""
    _require_values(values, "mean")
    return math.fsum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """
    Lower-middle element of a sorted copy; the input is left untouched.

    For even lengths this is index (n - 1) // 2, so median([1, 2, 3, 4]) == 2,
    not the upper-middle index n // 2 (which would give 3).
    """
    _require_values(values, "median")
    ordered = sorted(values)
    return ordered[(len(ordered) - 1) // 2]


def standard_deviation(values: Sequence[float], mean_value: Optional[float] = None) -> float:
    """Population standard deviation (divisor n)."""
    _require_values(values, "standard_deviation")
    if _is_constant(values):
        return 0.0
    if mean_value is None:
        mean_value = mean(values)
    variance = math.fsum((v - mean_value) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson product-moment correlation.

        r = (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²) · (nΣy² − (Σy)²))

    A zero denominator (either sequence constant) yields 0.0. The result is
    clamped to [-1, 1] against floating-point overshoot.
    """
    if len(x) != len(y):
        raise ValueError(f"pearson_correlation() needs equal lengths, got {len(x)} and {len(y)}")
    _require_values(x, "pearson_correlation")
    if _is_constant(x) or _is_constant(y):
        return 0.0

    n = len(x)
    sum_x = math.fsum(x)
    sum_y = math.fsum(y)
    sum_xy = math.fsum(a * b for a, b in zip(x, y))
    sum_x2 = math.fsum(a * a for a in x)
    sum_y2 = math.fsum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    var_x = n * sum_x2 - sum_x * sum_x
    var_y = n * sum_y2 - sum_y * sum_y
    if var_x <= 0 or var_y <= 0:
        return 0.0
    denominator = math.sqrt(var_x * var_y)
    if denominator == 0:
        return 0.0
    return max(-1.0, min(1.0, numerator / denominator))
