"""Content repository protocol and in-memory implementation.

The ContentRepository protocol is the read-only fetch capability the badge
score calculation consumes. Implementations return None for unknown ids;
translating that into ``BundleNotFoundError`` (or a skipped scenario) is the
caller's job.

InMemoryContentRepository backs tests and embedding callers that already
hold their content in memory. YamlContentRepository (``yaml_repo``) reads
a content directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storycompass.models import ContentBundle, Scenario


@runtime_checkable
class ContentRepository(Protocol):
    """Read-only access to scenarios and bundles."""

    async def get_scenario_by_id(self, scenario_id: str) -> Scenario | None:
        """Return the scenario with this id, or None if not found."""
        ...

    async def get_bundle_by_id(self, bundle_id: str) -> ContentBundle | None:
        """Return the bundle with this id, or None if not found."""
        ...


class InMemoryContentRepository:
    """Dict-backed content repository."""

    def __init__(
        self,
        scenarios: Iterable[Scenario] = (),
        bundles: Iterable[ContentBundle] = (),
    ) -> None:
        self._scenarios: dict[str, Scenario] = {}
        self._bundles: dict[str, ContentBundle] = {}
        for scenario in scenarios:
            self.add_scenario(scenario)
        for bundle in bundles:
            self.add_bundle(bundle)

    def add_scenario(self, scenario: Scenario) -> None:
        """Add or replace a scenario."""
        self._scenarios[scenario.id] = scenario

    def add_bundle(self, bundle: ContentBundle) -> None:
        """Add or replace a bundle."""
        self._bundles[bundle.id] = bundle

    def list_scenarios(self) -> list[Scenario]:
        return list(self._scenarios.values())

    async def get_scenario_by_id(self, scenario_id: str) -> Scenario | None:
        return self._scenarios.get(scenario_id)

    async def get_bundle_by_id(self, bundle_id: str) -> ContentBundle | None:
        return self._bundles.get(bundle_id)
