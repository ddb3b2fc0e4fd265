"""Structured logging for automodel.

structlog renders every event through one processor chain. ``dev`` mode
prints key=value lines, ``prod`` mode prints JSON lines; both go to stderr
so stdout stays free for command output. ``AUTOMODEL_LOG_MODE`` picks the
mode when none is given. The engine's own ``log_level`` setting
(silent, minimal, normal, verbose) is applied with apply_verbosity().

Event names are dot.notation, domain.entity.verb_past_tense, e.g.
"selection.model.selected" or "config.snapshot.replaced".

Usage:
    from automodel.observability import bound_context, get_logger

    log = get_logger(__name__)
    with bound_context(agent="build"):
        log.info("selection.model.selected", tier="simple")
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from enum import Enum
from functools import partialmethod
import logging
from logging.handlers import TimedRotatingFileHandler
import os
from pathlib import Path
import sys
from typing import Any, Literal

from pydantic import BaseModel, Field
import structlog

Verbosity = Literal["silent", "minimal", "normal", "verbose"]

_VERBOSITY_LEVELS: dict[str, int] = {
    # above CRITICAL, so the filter drops everything
    "silent": logging.CRITICAL + 10,
    "minimal": logging.WARNING,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}


class LogMode(str, Enum):
    """Rendering mode for log lines."""

    DEV = "dev"
    PROD = "prod"


class LoggingConfig(BaseModel):
    """How and where log lines are written.

    Attributes:
        mode: dev renders key=value lines, prod renders JSON.
        log_level: A stdlib level name ("INFO") or an engine verbosity.
        log_dir: Directory of the optional log file.
        max_log_days: Rotated files kept when file logging is on.
        enable_file_logging: Also append JSON lines to log_dir/automodel.log.
    """

    mode: LogMode = Field(default=LogMode.DEV)
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".automodel" / "logs")
    max_log_days: int = Field(default=7, ge=1, le=365)
    enable_file_logging: bool = Field(default=False)

    model_config = {"frozen": True}


_current_config: LoggingConfig | None = None
_console_logging_enabled: bool = True


def _mode_from_env() -> LogMode:
    if os.environ.get("AUTOMODEL_LOG_MODE", "").lower() == "prod":
        return LogMode.PROD
    return LogMode.DEV


def get_log_level(name: str) -> int:
    """Map a level name or engine verbosity to a logging constant.

    Unknown names map to logging.INFO.
    """
    verbosity = _VERBOSITY_LEVELS.get(name.lower())
    if verbosity is not None:
        return verbosity
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _rotating_file(config: LoggingConfig) -> TimedRotatingFileHandler | None:
    if not config.enable_file_logging:
        return None

    config.log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=str(config.log_dir / "automodel.log"),
        when="midnight",
        backupCount=config.max_log_days,
        encoding="utf-8",
        utc=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _processors(mode: LogMode) -> list[Any]:
    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=False)
        if mode == LogMode.DEV
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def set_console_logging(enabled: bool) -> None:
    """Turn stderr output on or off.

    ``automodel check --json`` turns it off while it prints.
    """
    global _console_logging_enabled
    _console_logging_enabled = enabled


def is_console_logging_enabled() -> bool:
    return _console_logging_enabled


class _LineSink:
    """Receives rendered lines from structlog."""

    def __init__(self, file_handler: TimedRotatingFileHandler | None) -> None:
        self._file_handler = file_handler

    def _write(self, level: int, line: str) -> None:
        if _console_logging_enabled:
            print(line, file=sys.stderr)
        if self._file_handler is not None:
            record = logging.makeLogRecord({"name": "automodel", "levelno": level, "msg": line})
            self._file_handler.emit(record)

    debug = partialmethod(_write, logging.DEBUG)
    info = partialmethod(_write, logging.INFO)
    warning = partialmethod(_write, logging.WARNING)
    error = partialmethod(_write, logging.ERROR)


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Configure structlog. Calling again reconfigures in place.

    Args:
        config: Logging configuration. None means defaults, with the mode
            read from AUTOMODEL_LOG_MODE.
    """
    global _current_config

    if config is None:
        config = LoggingConfig(mode=_mode_from_env())

    file_handler = _rotating_file(config)
    structlog.configure(
        processors=_processors(config.mode),
        wrapper_class=structlog.make_filtering_bound_logger(get_log_level(config.log_level)),
        context_class=dict,
        logger_factory=lambda *_: _LineSink(file_handler),
        cache_logger_on_first_use=False,
    )
    _current_config = config


def apply_verbosity(verbosity: Verbosity) -> None:
    """Swap the level to an engine verbosity, keeping mode and file settings."""
    base = _current_config or LoggingConfig(mode=_mode_from_env())
    configure_logging(base.model_copy(update={"log_level": verbosity}))


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, configuring defaults on first use."""
    if _current_config is None:
        configure_logging()
    return structlog.get_logger(name)


def bound_context(**values: Any) -> AbstractContextManager[None]:
    """Add values to every log entry written inside a ``with`` block.

    Values bound before the block are restored when it exits.

    Example:
        with bound_context(agent="build", strategy="cost-optimized"):
            log.info("selection.model.selected")
    """
    return structlog.contextvars.bound_contextvars(**values)


def get_current_config() -> LoggingConfig | None:
    return _current_config


def is_configured() -> bool:
    return _current_config is not None


def reset_logging() -> None:
    """Forget the current configuration and bound context. For tests."""
    global _current_config
    _current_config = None
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
