"""Structural validation of scenario scene graphs.

A scenario is well-formed when:

- scene ids are unique and the start scene exists;
- every non-terminal transition names an existing scene;
- no path can loop back onto a scene that is still in progress;
- every scene is reachable from the start scene.

Problems are collected, never raised: one traversal reports every cycle,
dangling reference and unreachable scene it can find. These are pure,
deterministic functions over the scenario.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from storycompass.errors import ScenarioGraphError
from storycompass.graph.index import SceneIndex, build_scene_index
from storycompass.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

    from storycompass.models import Scenario

log = get_logger(__name__)

LOOP_MARKER = "Infinite loop detected"

__all__ = [
    "LOOP_MARKER",
    "ValidatedScenario",
    "ValidationCheck",
    "ValidationReport",
    "run_scenario_checks",
    "validate_graph",
]


@dataclass
class ValidationCheck:
    """Result of a single validation check.

    Attributes:
        name: Identifier for the check.
        severity: "pass", "warn", or "fail".
        message: Human-readable description of the result.
        details: One entry per problem found.
    """

    name: str
    severity: Literal["pass", "warn", "fail"]
    message: str = ""
    details: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    """Aggregated results of the checks run on one scenario."""

    scenario_id: str
    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """True if any check has severity 'fail'."""
        return any(c.severity == "fail" for c in self.checks)

    @property
    def errors(self) -> list[str]:
        """Every problem reported by a failing check, in check order."""
        return [d for c in self.checks if c.severity == "fail" for d in c.details]

    @property
    def summary(self) -> str:
        """Human-readable summary of all checks."""
        fails = sum(1 for c in self.checks if c.severity == "fail")
        warns = sum(1 for c in self.checks if c.severity == "warn")
        passes = sum(1 for c in self.checks if c.severity == "pass")

        parts: list[str] = []
        if fails:
            parts.append(f"{fails} failed")
        if warns:
            parts.append(f"{warns} warnings")
        if passes:
            parts.append(f"{passes} passed")
        return ", ".join(parts)


@dataclass
class _GraphAnalysis:
    duplicates: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    cycles: list[str] = field(default_factory=list)
    unreachable: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [*self.duplicates, *self.references, *self.cycles, *self.unreachable]


def _walk(index: SceneIndex, analysis: _GraphAnalysis) -> set[str]:
    """Depth-first walk from the start scene, recording back-edges.

    Uses an explicit stack of (scene, successor iterator) frames so graph
    depth is not bounded by the interpreter's recursion limit.

    Returns:
        Ids of every scene reached.
    """
    start = index.start_id
    if start is None or not index.has_scene(start):
        return set()

    visited: set[str] = {start}
    on_path: set[str] = {start}
    seen_back_edges: set[tuple[str, str]] = set()
    stack: list[tuple[str, Iterator[str]]] = [(start, iter(index.successors(start)))]

    while stack:
        current, successors = stack[-1]
        target = next(successors, None)
        if target is None:
            stack.pop()
            on_path.discard(current)
            continue

        if not index.has_scene(target):
            continue  # dangling, reported separately

        if target in on_path:
            if (current, target) not in seen_back_edges:
                seen_back_edges.add((current, target))
                if current == target:
                    msg = f"{LOOP_MARKER}: scene '{index.title_of(current)}' leads to itself"
                else:
                    msg = (
                        f"{LOOP_MARKER}: scene '{index.title_of(current)}' leads back to "
                        f"'{index.title_of(target)}'"
                    )
                analysis.cycles.append(msg)
            continue

        if target in visited:
            continue  # reconvergence, not a loop

        visited.add(target)
        on_path.add(target)
        stack.append((target, iter(index.successors(target))))

    return visited


def _analyze(scenario: Scenario) -> _GraphAnalysis:
    analysis = _GraphAnalysis()
    if not scenario.scenes:
        return analysis

    index = build_scene_index(scenario)

    for scene_id in index.duplicate_ids:
        analysis.duplicates.append(f"Duplicate scene id '{scene_id}'")

    if index.start_id is None or not index.has_scene(index.start_id):
        analysis.references.append(f"Start scene '{index.start_id}' does not exist")
        return analysis

    for transition in index.dangling_references():
        via = f" via choice '{transition.label}'" if transition.label else ""
        analysis.references.append(
            f"Scene '{index.title_of(transition.source)}' references missing scene "
            f"'{transition.target}'{via}"
        )

    visited = _walk(index, analysis)

    for scene_id in index.scene_ids:
        if scene_id not in visited:
            analysis.unreachable.append(
                f"Scene '{index.title_of(scene_id)}' is unreachable from the start scene"
            )

    return analysis


def validate_graph(scenario: Scenario) -> tuple[bool, list[str]]:
    """Check that a scenario's scene graph is well-formed.

    A scenario with no scenes is vacuously valid. Reconverging branches
    (diamonds) are valid; only an edge back onto a scene still on the
    current path is a loop.

    Args:
        scenario: The scenario to check.

    Returns:
        Tuple of (ok, errors). ``errors`` lists every problem found; loop
        errors contain ``LOOP_MARKER`` and unreachable scenes are named
        by title.
    """
    errors = _analyze(scenario).errors
    return not errors, errors


def run_scenario_checks(scenario: Scenario) -> ValidationReport:
    """Run the structural checks and report each category separately."""
    analysis = _analyze(scenario)
    report = ValidationReport(scenario_id=scenario.id)

    categories = [
        ("unique_scene_ids", analysis.duplicates, "Scene ids are unique"),
        ("scene_references", analysis.references, "All scene references resolve"),
        ("scene_cycles", analysis.cycles, "No infinite loops"),
        ("scene_reachability", analysis.unreachable, "All scenes reachable from start"),
    ]
    for name, problems, ok_message in categories:
        if problems:
            report.checks.append(
                ValidationCheck(
                    name=name,
                    severity="fail",
                    message=f"{len(problems)} problem(s): {problems[0]}",
                    details=list(problems),
                )
            )
        else:
            report.checks.append(ValidationCheck(name=name, severity="pass", message=ok_message))

    return report


_FROM_SCENARIO = object()


@dataclass(frozen=True)
class ValidatedScenario:
    """A scenario proven to have a well-formed, acyclic scene graph.

    Obtain instances through :meth:`from_scenario`; direct construction raises
    TypeError. Path enumeration only accepts this type, so scoring can never
    walk a cyclic graph.
    """

    scenario: Scenario
    index: SceneIndex = field(repr=False, compare=False)
    _token: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._token is not _FROM_SCENARIO:
            msg = "ValidatedScenario must be created with ValidatedScenario.from_scenario()"
            raise TypeError(msg)

    @classmethod
    def from_scenario(cls, scenario: Scenario) -> ValidatedScenario:
        """Validate a scenario and wrap it.

        Raises:
            ScenarioGraphError: If ``validate_graph`` reports any error.
        """
        ok, errors = validate_graph(scenario)
        if not ok:
            log.warning(
                "scenario_graph_invalid",
                scenario_id=scenario.id,
                error_count=len(errors),
            )
            raise ScenarioGraphError(scenario_id=scenario.id, errors=errors)
        return cls(scenario=scenario, index=build_scene_index(scenario), _token=_FROM_SCENARIO)
