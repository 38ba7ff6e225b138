"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from storycompass.models import Branch, CompassChange, ContentBundle, Scenario, Scene
from storycompass.storage import InMemoryContentRepository


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment overrides out of test runs."""
    monkeypatch.delenv("STORYCOMPASS_CONTENT_DIR", raising=False)
    monkeypatch.delenv("STORYCOMPASS_MAX_CONCURRENCY", raising=False)
    monkeypatch.delenv("STORYCOMPASS_CONFIG", raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


def _branch(choice: str, target: str | None, axis: str | None = None, delta: float = 0.0) -> Branch:
    change = CompassChange(axis=axis, delta=delta) if axis else None
    return Branch(choice=choice, next_scene_id=target, compass_change=change)


def _linear_scenario() -> Scenario:
    return Scenario(
        id="scenario-linear",
        title="Linear Path Scenario",
        scenes=[
            Scene(
                id="scene-1",
                title="Start",
                scene_type="choice",
                branches=[_branch("Go forward", "scene-2", "Courage", 10.0)],
            ),
            Scene(
                id="scene-2",
                title="Middle",
                scene_type="choice",
                branches=[_branch("Continue", "scene-3", "Courage", 5.0)],
            ),
            Scene(id="scene-3", title="End", scene_type="special"),
        ],
    )


def _branching_scenario() -> Scenario:
    return Scenario(
        id="scenario-branching",
        title="Branching Scenario",
        scenes=[
            Scene(
                id="branch-start",
                title="Start",
                scene_type="choice",
                branches=[
                    _branch("Path A", "branch-a", "Wisdom", 20.0),
                    _branch("Path B", "branch-b", "Wisdom", 10.0),
                ],
            ),
            Scene(id="branch-a", title="Path A End", scene_type="special"),
            Scene(id="branch-b", title="Path B End", scene_type="special"),
        ],
    )


def _multi_axis_scenario() -> Scenario:
    return Scenario(
        id="scenario-multi-axis",
        title="Multi-Axis Scenario",
        scenes=[
            Scene(
                id="multi-start",
                title="Start",
                scene_type="choice",
                branches=[
                    _branch("Brave choice", "multi-end", "Courage", 15.0),
                    _branch("Wise choice", "multi-end", "Wisdom", 12.0),
                ],
            ),
            Scene(
                id="multi-end",
                title="End",
                scene_type="choice",
                branches=[_branch("Final choice", "", "Empathy", 8.0)],
            ),
        ],
    )


def _complex_scenario() -> Scenario:
    return Scenario(
        id="scenario-complex",
        title="Complex Branching",
        scenes=[
            Scene(
                id="complex-1",
                title="Start",
                scene_type="choice",
                branches=[
                    _branch("Option 1", "complex-2a", "Courage", 5.0),
                    _branch("Option 2", "complex-2b", "Courage", 10.0),
                    _branch("Option 3", "complex-2c", "Courage", 15.0),
                ],
            ),
            Scene(
                id="complex-2a",
                title="Path A",
                scene_type="choice",
                branches=[_branch("Continue", "", "Courage", 3.0)],
            ),
            Scene(
                id="complex-2b",
                title="Path B",
                scene_type="choice",
                branches=[_branch("Continue", "", "Courage", 7.0)],
            ),
            Scene(
                id="complex-2c",
                title="Path C",
                scene_type="choice",
                branches=[_branch("Continue", "", "Courage", 12.0)],
            ),
        ],
    )


@pytest.fixture
def sample_scenarios() -> list[Scenario]:
    """Linear, branching, multi-axis and complex scenarios."""
    return [
        _linear_scenario(),
        _branching_scenario(),
        _multi_axis_scenario(),
        _complex_scenario(),
    ]


@pytest.fixture
def sample_bundles() -> list[ContentBundle]:
    """Full test bundle, a single-scenario bundle and an empty bundle."""
    return [
        ContentBundle(
            id="bundle-test",
            title="Test Bundle",
            scenario_ids=[
                "scenario-linear",
                "scenario-branching",
                "scenario-multi-axis",
                "scenario-complex",
            ],
        ),
        ContentBundle(id="bundle-single", title="Single", scenario_ids=["scenario-linear"]),
        ContentBundle(id="bundle-empty", title="Empty", scenario_ids=[]),
    ]


@pytest.fixture
def repository(
    sample_scenarios: list[Scenario], sample_bundles: list[ContentBundle]
) -> InMemoryContentRepository:
    """In-memory repository seeded with the sample content."""
    return InMemoryContentRepository(scenarios=sample_scenarios, bundles=sample_bundles)
