"""Percentile over a distribution of path totals.

Linear rank interpolation: for ``n`` sorted scores and percentile ``p`` the
rank is ``p / 100 * (n - 1)``; the result interpolates between the order
statistics at the floor and ceiling of that rank. p=0 gives the minimum,
p=100 the maximum, and the result never decreases as p grows.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from storycompass.errors import EmptyScoresError, InvalidPercentileError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def check_percentile(p: float) -> None:
    """Raise InvalidPercentileError unless ``0 <= p <= 100``."""
    if math.isnan(p) or p < 0 or p > 100:
        raise InvalidPercentileError(percentiles=[p])


def compute_percentile(sorted_scores: Sequence[float], p: float) -> float:
    """Return the score at percentile ``p`` of an ascending score list.

    Args:
        sorted_scores: Scores in ascending order (duplicates allowed).
        p: Percentile between 0 and 100 inclusive.

    Returns:
        The interpolated score.

    Raises:
        InvalidPercentileError: If p is outside [0, 100].
        EmptyScoresError: If sorted_scores is empty.
    """
    check_percentile(p)
    if not sorted_scores:
        raise EmptyScoresError()

    n = len(sorted_scores)
    if n == 1:
        return float(sorted_scores[0])

    position = (p / 100.0) * (n - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return float(sorted_scores[lower])

    lower_value = sorted_scores[lower]
    upper_value = sorted_scores[upper]
    return lower_value + (upper_value - lower_value) * (position - lower)


def compute_percentiles(scores: Iterable[float], percentiles: Iterable[float]) -> dict[float, float]:
    """Compute several percentiles of an unsorted score collection.

    Returns:
        Mapping of each requested percentile to its score, in request order.
    """
    ordered = sorted(scores)
    return {float(p): compute_percentile(ordered, p) for p in percentiles}
