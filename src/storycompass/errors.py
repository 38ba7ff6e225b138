"""Error types for scenario validation and badge score calculation.

Three families are kept distinct so callers can map them to policy:

- Input errors (``ScoringInputError`` and subclasses) are raised immediately
  for malformed requests and are also ``ValueError`` instances.
- ``BundleNotFoundError`` signals a missing resource (also a ``LookupError``).
- ``ScenarioGraphError`` wraps the structural error list produced by
  ``validate_graph`` when a caller demands a validated scenario.

Structural problems found by ``validate_graph`` itself are returned as
strings, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - dataclass field type


class StoryCompassError(Exception):
    """Base class for all StoryCompass errors."""


class ScoringInputError(StoryCompassError, ValueError):
    """Raised when a scoring request is malformed."""


@dataclass
class InvalidBundleIdError(ScoringInputError):
    """Raised when the bundle id is missing or blank.

    Attributes:
        bundle_id: The rejected value (may be None).
    """

    bundle_id: str | None = None

    def __post_init__(self) -> None:
        super().__init__("Content bundle ID cannot be null or empty")


@dataclass
class InvalidPercentileError(ScoringInputError):
    """Raised when the requested percentiles are empty or out of range.

    Attributes:
        percentiles: The offending values. Empty when no percentiles were given.
    """

    percentiles: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.percentiles:
            msg = "Percentiles cannot be null or empty"
        else:
            shown = ", ".join(f"{p:g}" for p in self.percentiles[:5])
            msg = f"Percentiles must be between 0 and 100 (got {shown})"
        super().__init__(msg)


class EmptyScoresError(ScoringInputError):
    """Raised when a percentile is requested over an empty score list."""

    def __init__(self) -> None:
        super().__init__("Cannot compute a percentile over an empty score list")


@dataclass
class BundleNotFoundError(StoryCompassError, LookupError):
    """Raised when no content bundle matches the requested id.

    Attributes:
        bundle_id: The id that was looked up.
    """

    bundle_id: str

    def __post_init__(self) -> None:
        super().__init__(f"Content bundle not found: {self.bundle_id}")


@dataclass
class ScenarioGraphError(StoryCompassError):
    """Raised when a scenario that failed validation is used for scoring.

    Attributes:
        scenario_id: The scenario that failed.
        errors: Structural errors reported by ``validate_graph``.
    """

    scenario_id: str
    errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(
            f"Scenario '{self.scenario_id}' has an invalid scene graph: "
            f"{len(self.errors)} error(s)"
        )

    def __str__(self) -> str:
        lines = [f"Scenario '{self.scenario_id}' has an invalid scene graph:"]
        for err in self.errors[:5]:
            lines.append(f"  - {err}")
        if len(self.errors) > 5:
            lines.append(f"  - ... and {len(self.errors) - 5} more")
        return "\n".join(lines)


class ContentLoadError(StoryCompassError):
    """Raised when a scenario or bundle file cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load content file {path}: {reason}")
