"""Statistics primitives and fit-quality metrics.

Every function tolerates empty input and returns 0 rather than raising,
so segment code can call them on empty groups without guarding.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence


def median(values: Sequence[float]) -> float:
    """Median of ``values``; 0 for an empty sequence."""
    if not values:
        return 0
    return statistics.median(values)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean of ``values``; 0 for an empty sequence."""
    if not values:
        return 0
    return statistics.fmean(values)


def r_squared(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Coefficient of determination, ``1 - SSres / SStot``.

    ``actual`` and ``predicted`` are paired by index and must have the same
    length. A constant ``actual`` series has no variance to explain: the
    result is 1.0 when the predictions match it exactly and 0.0 otherwise.
    """
    if not actual:
        return 0.0
    mean_actual = mean(actual)
    ss_total = sum((y - mean_actual) ** 2 for y in actual)
    ss_residual = sum((y - p) ** 2 for y, p in zip(actual, predicted))
    if ss_total == 0:
        return 1.0 if ss_residual == 0 else 0.0
    return 1 - ss_residual / ss_total


def mean_absolute_error(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Mean of ``|actual - predicted|``."""
    return mean([abs(a - p) for a, p in zip(actual, predicted)])


def mean_absolute_percentage_error(
    actual: Sequence[float], predicted: Sequence[float]
) -> float:
    """Mean absolute percentage error, in percent.

    Undefined when an actual value is exactly zero; ``math.inf`` is
    returned in that case.
    """
    if any(a == 0 for a in actual):
        return math.inf
    return mean([abs((a - p) / a) for a, p in zip(actual, predicted)]) * 100
