"""Scene graph package - adjacency index and structural validation."""

from storycompass.graph.index import SceneIndex, Transition, build_scene_index
from storycompass.graph.validation import (
    LOOP_MARKER,
    ValidatedScenario,
    ValidationCheck,
    ValidationReport,
    run_scenario_checks,
    validate_graph,
)

__all__ = [
    "LOOP_MARKER",
    "SceneIndex",
    "Transition",
    "ValidatedScenario",
    "ValidationCheck",
    "ValidationReport",
    "build_scene_index",
    "run_scenario_checks",
    "validate_graph",
]
