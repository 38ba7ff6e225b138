"""Adjacency view of a scenario's scene graph.

The index is the single place that decides what counts as an edge:

- a scene's default ``next_scene_id`` (when non-blank) is its first
  transition;
- every branch follows in declaration order;
- a transition with no target is *terminal*: taking it ends the path and it
  does not point at any node.

Validation and path enumeration both walk this view so they always agree
on the shape of the graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storycompass.models import CompassChange, Scenario


@dataclass(frozen=True)
class Transition:
    """One outgoing move from a scene.

    Attributes:
        source: Scene the transition leaves from.
        target: Scene id it leads to, or None if it ends the path.
        label: Branch choice text ("" for the default next-scene move).
        compass_change: Delta applied when the transition is taken.
        is_default: True for the scene's default next-scene move.
    """

    source: str
    target: str | None
    label: str = ""
    compass_change: CompassChange | None = None
    is_default: bool = False

    @property
    def is_terminal(self) -> bool:
        """True if taking this transition ends the path."""
        return self.target is None


@dataclass
class SceneIndex:
    """Ordered transitions for every scene of one scenario.

    Attributes:
        start_id: Root scene id (None for an empty scenario).
        scene_ids: Distinct scene ids in declaration order.
        duplicate_ids: Ids declared more than once (first declaration wins).
    """

    start_id: str | None
    scene_ids: list[str] = field(default_factory=list)
    duplicate_ids: list[str] = field(default_factory=list)
    _transitions: dict[str, list[Transition]] = field(default_factory=dict, repr=False)
    _titles: dict[str, str] = field(default_factory=dict, repr=False)

    def has_scene(self, scene_id: str) -> bool:
        return scene_id in self._transitions

    def title_of(self, scene_id: str) -> str:
        """Display title of a scene, falling back to its id."""
        return self._titles.get(scene_id) or scene_id

    def transitions(self, scene_id: str) -> list[Transition]:
        """All transitions out of a scene, terminal ones included."""
        return self._transitions.get(scene_id, [])

    def edges(self, scene_id: str) -> list[Transition]:
        """Node-to-node transitions out of a scene, in order."""
        return [t for t in self.transitions(scene_id) if t.target is not None]

    def successors(self, scene_id: str) -> list[str]:
        """Target scene ids of a scene's edges, in order (may repeat)."""
        return [t.target for t in self.edges(scene_id) if t.target is not None]

    def dangling_references(self) -> list[Transition]:
        """Edges whose target names no scene in the scenario."""
        return [
            t
            for sid in self.scene_ids
            for t in self.edges(sid)
            if t.target is not None and not self.has_scene(t.target)
        ]


def build_scene_index(scenario: Scenario) -> SceneIndex:
    """Build the transition index for a scenario.

    Args:
        scenario: The scenario to index. Not modified.

    Returns:
        SceneIndex covering every distinct scene id.
    """
    index = SceneIndex(start_id=scenario.root_scene_id)

    for scene in scenario.scenes:
        if scene.id in index._transitions:
            if scene.id not in index.duplicate_ids:
                index.duplicate_ids.append(scene.id)
            continue

        transitions: list[Transition] = []
        if scene.next_scene_id:
            transitions.append(
                Transition(source=scene.id, target=scene.next_scene_id, is_default=True)
            )
        for branch in scene.branches:
            transitions.append(
                Transition(
                    source=scene.id,
                    target=branch.next_scene_id,
                    label=branch.choice,
                    compass_change=branch.compass_change,
                )
            )

        index.scene_ids.append(scene.id)
        index._transitions[scene.id] = transitions
        index._titles[scene.id] = scene.title

    return index
