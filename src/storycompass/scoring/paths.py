"""Enumerate every playthrough path of a validated scenario.

Each path starts at the root scene and follows one transition per scene
until it reaches a terminal scene or takes a terminal transition. Compass
changes on the transitions taken are summed per axis; the totals for one
path form a ``PathScore``.

The number of paths grows with the product of branch counts, so the walk
keeps only the current prefix on an explicit stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from storycompass.graph.validation import ValidatedScenario
from storycompass.observability.logging import get_logger

if TYPE_CHECKING:
    from storycompass.graph.index import Transition
    from storycompass.models import PathScore

log = get_logger(__name__)


@dataclass(frozen=True)
class _AxisTotals:
    """Immutable per-path accumulator keyed by normalised axis name.

    ``names`` keeps the display casing first seen along this path.
    """

    totals: tuple[tuple[str, float], ...] = ()
    names: tuple[tuple[str, str], ...] = ()

    def add(self, transition: Transition) -> _AxisTotals:
        change = transition.compass_change
        if change is None or not change.axis:
            return self
        key = change.axis_key
        totals = dict(self.totals)
        names = dict(self.names)
        totals[key] = totals.get(key, 0.0) + change.delta
        names.setdefault(key, change.axis)
        return _AxisTotals(tuple(totals.items()), tuple(names.items()))

    def to_path_score(self) -> PathScore:
        names = dict(self.names)
        return {names[key]: total for key, total in self.totals}


def enumerate_paths(validated: ValidatedScenario) -> list[PathScore]:
    """Return the axis totals of every complete path through a scenario.

    Transitions are explored in index order (default next scene first,
    then branches). A path is emitted when it reaches a scene without
    transitions or takes a transition with no target. Paths that touched no
    compass axis are not emitted, so a scenario without compass changes
    yields an empty list.

    Args:
        validated: Scenario proven acyclic by ``ValidatedScenario.from_scenario``.

    Returns:
        One PathScore per scored path. Axis names use the casing first
        seen along that path.

    Raises:
        TypeError: If given anything other than a ValidatedScenario.
    """
    if not isinstance(validated, ValidatedScenario):
        msg = (
            "enumerate_paths requires a ValidatedScenario; "
            "call ValidatedScenario.from_scenario() first"
        )
        raise TypeError(msg)

    index = validated.index
    start = index.start_id
    if start is None:
        return []

    paths: list[PathScore] = []
    total_paths = 0
    # A None scene id marks a terminal transition that has just been taken.
    stack: list[tuple[str | None, _AxisTotals]] = [(start, _AxisTotals())]

    while stack:
        scene_id, totals = stack.pop()
        transitions = index.transitions(scene_id) if scene_id is not None else []

        if not transitions:
            total_paths += 1
            if totals.totals:
                paths.append(totals.to_path_score())
            continue

        # Reversed so the first transition is explored first.
        for transition in reversed(transitions):
            stack.append((transition.target, totals.add(transition)))

    log.debug(
        "scenario_paths_enumerated",
        scenario_id=validated.scenario.id,
        paths=total_paths,
        scored_paths=len(paths),
    )
    return paths
