"""Group path totals from many scenarios by compass axis."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storycompass.models import PathScore


class AxisScoreAggregator:
    """Collects PathScores and groups them by case-insensitive axis name.

    The display name of each axis is the casing seen first; axes are
    reported in the order they were first seen.
    """

    def __init__(self) -> None:
        self._names: dict[str, str] = {}
        self._scores: dict[str, list[float]] = defaultdict(list)

    def add_path(self, path: PathScore) -> None:
        for axis, total in path.items():
            key = axis.casefold()
            self._names.setdefault(key, axis)
            self._scores[key].append(total)

    def add_paths(self, paths: Iterable[PathScore]) -> None:
        for path in paths:
            self.add_path(path)

    @property
    def axis_names(self) -> list[str]:
        return list(self._names.values())

    def sorted_scores(self) -> dict[str, list[float]]:
        """Display axis name -> ascending path totals (one entry per path)."""
        return {name: sorted(self._scores[key]) for key, name in self._names.items()}


def aggregate_path_scores(path_lists: Iterable[Iterable[PathScore]]) -> dict[str, list[float]]:
    """Aggregate per-scenario path lists into sorted totals per axis."""
    aggregator = AxisScoreAggregator()
    for paths in path_lists:
        aggregator.add_paths(paths)
    return aggregator.sorted_scores()
