"""Observability module for StoryCompass.

Provides structured logging.
"""

from storycompass.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
]
