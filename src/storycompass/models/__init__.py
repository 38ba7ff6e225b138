"""Pydantic models for scenario content and score results.

Scenarios, scenes, branches and bundles are frozen value objects supplied
by a content repository. ``AxisScoreResult`` is the response shape of the
badge score calculation.
"""

from storycompass.models.scenario import (
    AxisScoreResult,
    Branch,
    CompassChange,
    ContentBundle,
    PathScore,
    Scenario,
    Scene,
    SceneType,
)

__all__ = [
    "AxisScoreResult",
    "Branch",
    "CompassChange",
    "ContentBundle",
    "PathScore",
    "Scenario",
    "Scene",
    "SceneType",
]
