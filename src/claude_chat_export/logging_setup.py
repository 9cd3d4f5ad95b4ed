"""Logging bootstrap for the claude-chat-export command line.

Library code only calls logging.getLogger(__name__); handlers are attached
here, once, by the CLI.
"""

import logging
import os
from dataclasses import dataclass

LOG_LEVEL_ENV = "CLAUDE_CHAT_EXPORT_LOG_LEVEL"


@dataclass(frozen=True)
class LoggingRuntime:
    """Resolved runtime logging configuration."""

    level_name: str
    level: int


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str | None) -> tuple[str, int]:
    normalized = str(raw or "WARNING").strip().upper()
    level = getattr(logging, normalized, None)
    if not isinstance(level, int):
        level = logging.WARNING
    return str(logging.getLevelName(level)), level


def _make_stream_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
    return handler


def configure(level: str | None = None) -> LoggingRuntime:
    """Attach a stderr handler to the package logger.

    The level comes from `level`, else CLAUDE_CHAT_EXPORT_LOG_LEVEL, else
    WARNING. Idempotent: repeated calls return the first runtime.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level_value = _parse_level(level or os.environ.get(LOG_LEVEL_ENV))

    logger = logging.getLogger("claude_chat_export")
    logger.setLevel(level_value)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(_make_stream_handler(level_value))

    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name=level_name, level=level_value)
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    """Return configured logging runtime, if configure() has run."""
    return _RUNTIME


def reset() -> None:
    """Forget the configured runtime and detach handlers."""
    global _RUNTIME
    logger = logging.getLogger("claude_chat_export")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    _RUNTIME = None
