"""Structured logging for StoryCompass.

structlog renders through the stdlib ``logging`` bridge: every event goes to
a Rich console on stderr, filtered by CLI verbosity, and optionally to a JSONL
file that always receives DEBUG. Request-scoped keys (``bundle_id``,
``scenario_id``) are bound with ``structlog.contextvars`` by the scoring code
and merged into every event logged inside that scope, worker threads included.
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from structlog.typing import Processor

_configured = False
_file_handler: logging.FileHandler | None = None

_VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}

_SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _formatter(renderer: Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> None:
    """Configure console logging and, optionally, a JSONL event file.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG on the console.
        log_file: Append every event as one JSON object per line to this
            file. Parent directories are created.
    """
    global _configured

    close_file_logging()

    console_level = _VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)
    console_handler = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=False,
        show_path=verbosity >= 2,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=False)))
    handlers: list[logging.Handler] = [console_handler]

    if log_file is not None:
        handlers.append(_open_file_handler(log_file))

    root_level = logging.DEBUG if log_file is not None else console_level
    logging.basicConfig(level=root_level, handlers=handlers, force=True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=False,
    )
    _configured = True


def _open_file_handler(log_file: Path) -> logging.FileHandler:
    global _file_handler

    log_file.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    _file_handler.setLevel(logging.DEBUG)
    _file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer(default=str)))
    return _file_handler


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger, configuring defaults on first use."""
    if not _configured:
        configure_logging()
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger


def close_file_logging() -> None:
    """Detach and close the JSONL file handler, if one is open."""
    global _file_handler
    if _file_handler is None:
        return
    logging.getLogger().removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None
