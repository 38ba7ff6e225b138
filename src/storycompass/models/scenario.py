"""Scenario content models.

These models are the read-only inputs of the engine: a scenario is a list of
scenes, each scene optionally names a default next scene and lists player
branches, and a branch may carry a compass change. Edges are plain scene id
strings, never object references, so a scenario can describe any graph
shape (including the cyclic ones the validator exists to reject).

Field aliases accept the spellings used in scenario content files:
``next_scene`` / ``next_scene_id``, ``type`` for the scene type and ``text``
for a branch label.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator

SceneType = Literal["narrative", "choice", "roll", "special"]

PathScore = dict[str, float]
"""Axis name -> cumulative delta for one complete path."""


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, str):
        return value.strip()
    return value


SceneId = Annotated[str | None, BeforeValidator(_blank_to_none)]
"""Optional scene reference; blank strings mean "no scene"."""


class CompassChange(BaseModel):
    """A signed delta applied to one compass axis.

    Axis identity is case-insensitive; the stored name keeps its casing
    for display.
    """

    model_config = ConfigDict(frozen=True)

    axis: str
    delta: float = 0.0

    @field_validator("axis", mode="before")
    @classmethod
    def _strip_axis(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @property
    def axis_key(self) -> str:
        """Normalised axis identity used for grouping."""
        return self.axis.casefold()


class Branch(BaseModel):
    """A labelled player choice.

    An empty or missing ``next_scene_id`` ends the path when taken.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    choice: str = Field(default="", validation_alias=AliasChoices("choice", "text"))
    next_scene_id: SceneId = Field(
        default=None, validation_alias=AliasChoices("next_scene_id", "next_scene")
    )
    compass_change: CompassChange | None = None

    @property
    def is_terminal(self) -> bool:
        """True if taking this branch ends the path."""
        return self.next_scene_id is None


class Scene(BaseModel):
    """A node of the scenario graph."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = ""
    scene_type: SceneType = Field(
        default="narrative", validation_alias=AliasChoices("scene_type", "type")
    )
    next_scene_id: SceneId = Field(
        default=None, validation_alias=AliasChoices("next_scene_id", "next_scene")
    )
    branches: tuple[Branch, ...] = ()
    description: str = ""

    @field_validator("scene_type", mode="before")
    @classmethod
    def _lower_scene_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("branches", mode="before")
    @classmethod
    def _none_branches(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def display_name(self) -> str:
        """Title if set, otherwise the id."""
        return self.title or self.id

    @property
    def is_terminal(self) -> bool:
        """True if the scene has no default next scene and no branches."""
        return self.next_scene_id is None and not self.branches


class Scenario(BaseModel):
    """One interactive story: an ordered list of scenes.

    The traversal root is ``start_scene_id`` when given, otherwise the
    first scene in the list.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = ""
    description: str = ""
    scenes: tuple[Scene, ...] = ()
    start_scene_id: SceneId = Field(
        default=None, validation_alias=AliasChoices("start_scene_id", "start_scene")
    )

    @field_validator("scenes", mode="before")
    @classmethod
    def _none_scenes(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def root_scene_id(self) -> str | None:
        """Id of the scene traversal starts from, or None for an empty scenario."""
        if self.start_scene_id is not None:
            return self.start_scene_id
        return self.scenes[0].id if self.scenes else None

    def scene_by_id(self, scene_id: str) -> Scene | None:
        """Return the first scene declared with ``scene_id``."""
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    @property
    def start_scene(self) -> Scene | None:
        """The root scene, or None if it does not exist."""
        root = self.root_scene_id
        return self.scene_by_id(root) if root is not None else None

    def declared_axes(self) -> list[str]:
        """Distinct compass axes used by any branch, in first-seen casing."""
        seen: dict[str, str] = {}
        for scene in self.scenes:
            for branch in scene.branches:
                change = branch.compass_change
                if change is not None and change.axis and change.axis_key not in seen:
                    seen[change.axis_key] = change.axis
        return list(seen.values())


class ContentBundle(BaseModel):
    """A named collection of scenarios scored together."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = ""
    description: str = ""
    scenario_ids: tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("scenario_ids", "scenarios")
    )

    @field_validator("scenario_ids", mode="before")
    @classmethod
    def _none_ids(cls, value: Any) -> Any:
        return () if value is None else value


class AxisScoreResult(BaseModel):
    """Percentile table for one compass axis.

    Attributes:
        axis_name: Display name of the axis (first-seen casing).
        percentile_scores: Requested percentile -> computed score.
        path_count: Number of path totals the percentiles were computed from.
    """

    axis_name: str
    percentile_scores: dict[float, float] = Field(default_factory=dict)
    path_count: int = 0
