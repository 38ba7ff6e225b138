"""Engine configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

CONFIG_FILENAME = "storycompass.yaml"

# Default configuration values
DEFAULT_CONTENT_DIR = Path("content")
DEFAULT_PERCENTILES = [25.0, 50.0, 75.0, 90.0]
DEFAULT_MAX_CONCURRENCY = 4


class ConfigError(Exception):
    """Raised when engine configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")


@dataclass
class EngineConfig:
    """Configuration for scoring runs.

    Resolution order for overridable fields:
    1. Environment variable (STORYCOMPASS_CONTENT_DIR, STORYCOMPASS_MAX_CONCURRENCY)
    2. Config file
    3. Defaults

    Attributes:
        content_dir: Directory holding ``scenarios/`` and ``bundles/``.
        default_percentiles: Percentiles computed when none are requested.
        max_concurrency: Upper bound on scenarios enumerated at once.
        fetch_timeout: Seconds allowed for fetching a bundle and its
            scenarios, or None for no limit.
    """

    content_dir: Path = field(default_factory=lambda: DEFAULT_CONTENT_DIR)
    default_percentiles: list[float] = field(default_factory=lambda: list(DEFAULT_PERCENTILES))
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    fetch_timeout: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path | None = None) -> EngineConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary containing config fields.
            base_dir: Directory relative ``content_dir`` values resolve against.

        Returns:
            EngineConfig instance.

        Raises:
            ValueError: If a field has an invalid value.
        """
        content_dir = Path(data.get("content_dir", DEFAULT_CONTENT_DIR))
        if base_dir is not None and not content_dir.is_absolute():
            content_dir = base_dir / content_dir

        percentiles = [float(p) for p in data.get("default_percentiles", DEFAULT_PERCENTILES)]
        if not percentiles or any(p < 0 or p > 100 for p in percentiles):
            msg = "default_percentiles must be a non-empty list of values between 0 and 100"
            raise ValueError(msg)

        max_concurrency = int(data.get("max_concurrency", DEFAULT_MAX_CONCURRENCY))
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        timeout = data.get("fetch_timeout")
        return cls(
            content_dir=content_dir,
            default_percentiles=percentiles,
            max_concurrency=max_concurrency,
            fetch_timeout=float(timeout) if timeout is not None else None,
        ).with_env_overrides()

    def with_env_overrides(self) -> EngineConfig:
        """Apply environment variable overrides in place and return self.

        Raises:
            ValueError: If STORYCOMPASS_MAX_CONCURRENCY is not an integer.
        """
        env_dir = os.getenv("STORYCOMPASS_CONTENT_DIR")
        if env_dir:
            self.content_dir = Path(env_dir)
        env_concurrency = os.getenv("STORYCOMPASS_MAX_CONCURRENCY")
        if env_concurrency:
            try:
                self.max_concurrency = max(1, int(env_concurrency))
            except ValueError:
                msg = f"STORYCOMPASS_MAX_CONCURRENCY must be an integer (got {env_concurrency!r})"
                raise ValueError(msg) from None
        return self


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load engine configuration.

    Args:
        path: Config file, or a directory containing ``storycompass.yaml``.
            Defaults to the current directory. A missing file yields defaults.

    Returns:
        EngineConfig instance.

    Raises:
        ConfigError: If the file exists but cannot be loaded, or an
            environment override is invalid.
    """
    config_path = path or Path.cwd()
    if config_path.is_dir():
        config_path = config_path / CONFIG_FILENAME

    yaml = YAML()
    try:
        if not config_path.exists():
            return EngineConfig().with_env_overrides()

        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            raise ConfigError(config_path, "Empty file")

        return EngineConfig.from_dict(dict(data), base_dir=config_path.parent)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(config_path, str(e)) from e
