"""Content storage collaborators for the scoring engine."""

from storycompass.storage.repository import ContentRepository, InMemoryContentRepository
from storycompass.storage.yaml_repo import YamlContentRepository, load_scenario_file

__all__ = [
    "ContentRepository",
    "InMemoryContentRepository",
    "YamlContentRepository",
    "load_scenario_file",
]
