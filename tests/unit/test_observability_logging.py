"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
import structlog

import storycompass.observability.logging as log_module
from storycompass.observability import close_file_logging, configure_logging, get_logger
from storycompass.scoring.badges import calculate_badge_scores

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from storycompass.storage import InMemoryContentRepository


def _read_events(log_file: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    close_file_logging()
    structlog.contextvars.clear_contextvars()
    configure_logging()


class TestConfigureLogging:
    """Console levels and the optional JSONL file."""

    @pytest.mark.parametrize(
        ("verbosity", "level"),
        [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_console_level_follows_verbosity(self, verbosity: int, level: int) -> None:
        configure_logging(verbosity=verbosity)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].level == level
        assert logging.getLogger().level == level

    def test_file_opens_root_to_debug(self, tmp_path: Path) -> None:
        """The file gets DEBUG even when the console stays at WARNING."""
        configure_logging(verbosity=0, log_file=tmp_path / "logs" / "debug.jsonl")

        assert logging.getLogger().level == logging.DEBUG
        assert (tmp_path / "logs").is_dir()

    def test_asyncio_logger_quieted(self) -> None:
        configure_logging(verbosity=2)

        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_get_logger_configures_on_first_use(self) -> None:
        log_module._configured = False

        assert get_logger("storycompass.test") is not None
        assert log_module._configured is True

    def test_reconfiguring_replaces_file_handler(self, tmp_path: Path) -> None:
        configure_logging(log_file=tmp_path / "a.jsonl")
        first = log_module._file_handler
        assert first is not None

        configure_logging(log_file=tmp_path / "b.jsonl")

        assert first not in logging.getLogger().handlers
        assert log_module._file_handler is not first

    def test_close_file_logging_detaches_handler(self, tmp_path: Path) -> None:
        configure_logging(log_file=tmp_path / "debug.jsonl")
        handler = log_module._file_handler

        close_file_logging()

        assert log_module._file_handler is None
        assert handler not in logging.getLogger().handlers


class TestJsonlEvents:
    """Events written to the JSONL file."""

    def test_event_keys_written(self, tmp_path: Path) -> None:
        log_file = tmp_path / "debug.jsonl"
        configure_logging(verbosity=0, log_file=log_file)

        get_logger("storycompass.test").debug("scenario_scored", paths=3)
        close_file_logging()

        events = [e for e in _read_events(log_file) if e["event"] == "scenario_scored"]
        assert len(events) == 1
        assert events[0]["paths"] == 3
        assert events[0]["level"] == "debug"
        assert "timestamp" in events[0]

    def test_bound_contextvars_merged(self, tmp_path: Path) -> None:
        log_file = tmp_path / "debug.jsonl"
        configure_logging(log_file=log_file)

        with structlog.contextvars.bound_contextvars(bundle_id="b1"):
            get_logger("storycompass.test").info("inside")
        get_logger("storycompass.test").info("outside")
        close_file_logging()

        events = {e["event"]: e for e in _read_events(log_file)}
        assert events["inside"]["bundle_id"] == "b1"
        assert "bundle_id" not in events["outside"]

    @pytest.mark.asyncio
    async def test_scoring_events_carry_bundle_and_scenario(
        self, tmp_path: Path, repository: InMemoryContentRepository
    ) -> None:
        """Events logged on worker threads still see the calculation's context."""
        log_file = tmp_path / "debug.jsonl"
        configure_logging(log_file=log_file)

        await calculate_badge_scores(repository, "bundle-single", [50])
        close_file_logging()

        events = _read_events(log_file)
        scored = [e for e in events if e["event"] == "scenario_scored"]
        assert len(scored) == 1
        assert scored[0]["bundle_id"] == "bundle-single"
        assert scored[0]["scenario_id"] == "scenario-linear"

        finished = [e for e in events if e["event"] == "badge_scores_calculated"]
        assert finished[0]["bundle_id"] == "bundle-single"
        assert "scenario_id" not in finished[0]
        assert structlog.contextvars.get_contextvars() == {}
