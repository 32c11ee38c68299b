"""Logging configuration for fuzzy search system."""

import logging
import sys
from typing import Any, Dict, Optional, Union

QUIET_LIBRARIES = ("rapidfuzz", "numpy", "asyncio")


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level}")
    return resolved


def setup_logging(
    level: Union[str, int] = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Set up logging for the fuzzy search system.

    Args:
        level: Logging level name (DEBUG, INFO, ...) or number
        format_string: Custom format string
        include_timestamp: Whether to include timestamps
    """
    numeric_level = _resolve_level(level)

    if format_string is None:
        format_string = "%(name)s - %(levelname)s - %(message)s"
        if include_timestamp:
            format_string = "%(asctime)s - " + format_string

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        stream=sys.stdout,
        force=True
    )
    logging.getLogger("fuzzy_search").setLevel(numeric_level)

    # Reduce noise from external libraries
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging configured with level: {logging.getLevelName(numeric_level)}")


class StructuredLogger:
    """Logger that appends key=value request context to every message."""

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(name)
        self.context = dict(context or {})

    def with_context(self, **kwargs) -> 'StructuredLogger':
        """Return a logger carrying additional context."""
        return StructuredLogger(self.logger.name, {**self.context, **kwargs})

    def _format_message(self, message: str) -> str:
        fields = [f"{key}={value}" for key, value in self.context.items() if value is not None]
        if not fields:
            return message
        return f"{message} [{' '.join(fields)}]"

    def debug(self, message: str) -> None:
        self.logger.debug(self._format_message(message))

    def info(self, message: str) -> None:
        self.logger.info(self._format_message(message))

    def warning(self, message: str) -> None:
        self.logger.warning(self._format_message(message))

    def error(self, message: str) -> None:
        self.logger.error(self._format_message(message))
