"""Badge score calculation for a content bundle.

For every scenario in a bundle, enumerate all playthrough paths and their
compass totals, pool the totals per axis across the bundle, and report the
requested percentiles of each axis distribution. The percentiles are used
to calibrate badge thresholds.

Log events emitted during a calculation carry ``bundle_id`` through
structlog contextvars, and ``scenario_id`` while a scenario is scored.

Scenarios must have well-formed scene graphs: each one is wrapped in a
``ValidatedScenario`` before enumeration, so a cyclic scenario fails with
``ScenarioGraphError`` instead of looping.
"""

from __future__ import annotations

import asyncio
import math
from typing import TYPE_CHECKING

from structlog.contextvars import bound_contextvars

from storycompass.errors import BundleNotFoundError, InvalidBundleIdError, InvalidPercentileError
from storycompass.graph.validation import ValidatedScenario
from storycompass.models import AxisScoreResult
from storycompass.observability.logging import get_logger
from storycompass.scoring.aggregate import aggregate_path_scores
from storycompass.scoring.batching import run_in_threads
from storycompass.scoring.paths import enumerate_paths
from storycompass.scoring.percentile import compute_percentiles

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storycompass.config import EngineConfig
    from storycompass.models import ContentBundle, PathScore, Scenario
    from storycompass.storage.repository import ContentRepository

log = get_logger(__name__)


def _check_request(bundle_id: str | None, percentiles: Iterable[float] | None) -> list[float]:
    """Validate request inputs and return the percentiles as floats.

    Raises:
        InvalidBundleIdError: If bundle_id is None or blank.
        InvalidPercentileError: If percentiles are missing, empty or out of range.
    """
    if bundle_id is None or not str(bundle_id).strip():
        raise InvalidBundleIdError(bundle_id=bundle_id)

    requested = [float(p) for p in percentiles] if percentiles is not None else []
    if not requested:
        raise InvalidPercentileError(percentiles=[])

    invalid = [p for p in requested if math.isnan(p) or p < 0 or p > 100]
    if invalid:
        raise InvalidPercentileError(percentiles=invalid)
    return requested


async def _fetch_content(
    repository: ContentRepository, bundle_id: str
) -> tuple[ContentBundle, list[Scenario]]:
    bundle = await repository.get_bundle_by_id(bundle_id)
    if bundle is None:
        raise BundleNotFoundError(bundle_id=bundle_id)

    fetched = await asyncio.gather(
        *(repository.get_scenario_by_id(sid) for sid in bundle.scenario_ids)
    )

    scenarios: list[Scenario] = []
    for scenario_id, scenario in zip(bundle.scenario_ids, fetched, strict=True):
        if scenario is None:
            log.warning("scenario_missing_from_bundle", scenario_id=scenario_id)
            continue
        scenarios.append(scenario)
    return bundle, scenarios


def _score_scenario(scenario: Scenario) -> list[PathScore]:
    with bound_contextvars(scenario_id=scenario.id):
        paths = enumerate_paths(ValidatedScenario.from_scenario(scenario))
        log.debug("scenario_scored", title=scenario.title, paths=len(paths))
    return paths


async def calculate_badge_scores(
    repository: ContentRepository,
    bundle_id: str,
    percentiles: Iterable[float],
    *,
    max_concurrency: int = 4,
    fetch_timeout: float | None = None,
) -> list[AxisScoreResult]:
    """Calculate per-axis percentile scores for every scenario in a bundle.

    Args:
        repository: Source of the bundle and its scenarios.
        bundle_id: Bundle to score.
        percentiles: Percentiles to compute, each between 0 and 100.
        max_concurrency: Scenarios enumerated at once on worker threads.
        fetch_timeout: Seconds allowed for the repository fetch step.

    Returns:
        One AxisScoreResult per compass axis found, in first-seen order,
        each holding every requested percentile. Empty if the bundle has no
        scenarios or none of them carries a compass change.

    Raises:
        InvalidBundleIdError: If bundle_id is blank.
        InvalidPercentileError: If percentiles are empty or out of range.
        BundleNotFoundError: If no bundle has this id.
        ScenarioGraphError: If a scenario's scene graph is not well-formed.
        TimeoutError: If fetching exceeds ``fetch_timeout``.
    """
    requested = _check_request(bundle_id, percentiles)

    with bound_contextvars(bundle_id=bundle_id):
        async with asyncio.timeout(fetch_timeout):
            bundle, scenarios = await _fetch_content(repository, bundle_id)

        log.info(
            "badge_score_calculation_started",
            scenario_count=len(bundle.scenario_ids),
            scenarios_found=len(scenarios),
        )

        if not scenarios:
            log.warning("bundle_has_no_scenarios")
            return []

        per_scenario = await run_in_threads(scenarios, _score_scenario, max_concurrency)

        results: list[AxisScoreResult] = []
        for axis_name, scores in aggregate_path_scores(per_scenario).items():
            results.append(
                AxisScoreResult(
                    axis_name=axis_name,
                    percentile_scores=compute_percentiles(scores, requested),
                    path_count=len(scores),
                )
            )
            log.info("axis_percentiles_calculated", axis=axis_name, paths=len(scores))

        log.info("badge_scores_calculated", axes=len(results))
        return results


class BadgeScoreCalculator:
    """Badge score calculation bound to a repository and engine config."""

    def __init__(self, repository: ContentRepository, config: EngineConfig | None = None) -> None:
        self.repository = repository
        self.config = config

    async def calculate(
        self, bundle_id: str, percentiles: Iterable[float] | None = None
    ) -> list[AxisScoreResult]:
        """Score a bundle, defaulting to the configured percentiles.

        An explicitly empty ``percentiles`` list is rejected; None means
        "use the configured defaults".
        """
        if percentiles is None and self.config is not None:
            percentiles = self.config.default_percentiles
        return await calculate_badge_scores(
            self.repository,
            bundle_id,
            percentiles,  # type: ignore[arg-type]
            max_concurrency=self.config.max_concurrency if self.config else 4,
            fetch_timeout=self.config.fetch_timeout if self.config else None,
        )
