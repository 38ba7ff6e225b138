"""Read-only content repository backed by a directory of YAML files.

Layout::

    content_dir/
        scenarios/*.yaml   one scenario per file
        bundles/*.yaml     one bundle per file

Files are parsed on first access and indexed by their ``id`` field.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - used at runtime
from typing import TypeVar

from pydantic import BaseModel, ValidationError
from ruamel.yaml import YAML

from storycompass.errors import ContentLoadError
from storycompass.models import ContentBundle, Scenario
from storycompass.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

YAML_SUFFIXES = (".yaml", ".yml")


def _read_model(yaml: YAML, path: Path, model: type[T]) -> T:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except Exception as e:
        raise ContentLoadError(path, str(e)) from e

    if data is None:
        raise ContentLoadError(path, "Empty file")
    if not isinstance(data, dict):
        raise ContentLoadError(path, f"Expected a mapping, got {type(data).__name__}")

    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise ContentLoadError(path, str(e)) from e


def _yaml_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix in YAML_SUFFIXES and p.is_file())


def load_scenario_file(path: Path) -> Scenario:
    """Parse a single scenario file.

    Raises:
        ContentLoadError: If the file is unreadable or not a valid scenario.
    """
    return _read_model(YAML(typ="safe"), path, Scenario)


class YamlContentRepository:
    """Scenarios and bundles loaded from a content directory."""

    def __init__(self, content_dir: Path) -> None:
        """Initialize repository.

        Args:
            content_dir: Directory containing ``scenarios/`` and ``bundles/``.
        """
        self.content_dir = content_dir
        self.scenarios_path = content_dir / "scenarios"
        self.bundles_path = content_dir / "bundles"
        self._yaml = YAML(typ="safe")
        self._scenarios: dict[str, Scenario] | None = None
        self._bundles: dict[str, ContentBundle] | None = None

    def _load_all(self, directory: Path, model: type[T]) -> dict[str, T]:
        loaded: dict[str, T] = {}
        for path in _yaml_files(directory):
            item = _read_model(self._yaml, path, model)
            item_id = str(getattr(item, "id", ""))
            if item_id in loaded:
                log.warning("duplicate_content_id", id=item_id, path=str(path))
                continue
            loaded[item_id] = item
        log.debug("content_loaded", directory=str(directory), count=len(loaded))
        return loaded

    def _scenario_map(self) -> dict[str, Scenario]:
        if self._scenarios is None:
            self._scenarios = self._load_all(self.scenarios_path, Scenario)
        return self._scenarios

    def _bundle_map(self) -> dict[str, ContentBundle]:
        if self._bundles is None:
            self._bundles = self._load_all(self.bundles_path, ContentBundle)
        return self._bundles

    def list_scenarios(self) -> list[Scenario]:
        """All scenarios in the content directory, in file-name order."""
        return list(self._scenario_map().values())

    def list_bundles(self) -> list[ContentBundle]:
        return list(self._bundle_map().values())

    async def get_scenario_by_id(self, scenario_id: str) -> Scenario | None:
        return self._scenario_map().get(scenario_id)

    async def get_bundle_by_id(self, bundle_id: str) -> ContentBundle | None:
        return self._bundle_map().get(bundle_id)
