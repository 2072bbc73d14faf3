# src/compile_script/logs.py

import argparse
import logging
import os
import sys
from typing import Any, TextIO, cast

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE
from .runtime import current_runtime
from .utils import safe_log, should_use_color


# --- ANSI Colors -------------------------------------------------------------


RESET = "\033[0m"
CYAN = "\033[36m"
GRAY = "\033[90m"


LEVEL_ORDER = [
    "trace",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
    "silent",  # disables all logging
]


TAG_STYLES = {
    "TRACE": (GRAY, "[TRACE]"),
    "DEBUG": (CYAN, "[DEBUG]"),
    "WARNING": ("", "⚠️ "),
    "ERROR": ("", "❌ "),
    "CRITICAL": ("", "💥 "),
}

# sanity check
assert set(TAG_STYLES.keys()) <= {lvl.upper() for lvl in LEVEL_ORDER}, (  # noqa: S101
    "TAG_STYLES contains unknown levels"
)


TRACE_LEVEL = logging.DEBUG - 5
SILENT_LEVEL = logging.CRITICAL + 1

LEVEL_MAP = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "SILENT": SILENT_LEVEL,
}


# --- Program logger ------------------------------------------------------------


class AppLogger(logging.Logger):
    """Logger with a TRACE level and helpers for CLI error reporting."""

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    @property
    def level_name(self) -> str:
        for name, value in LEVEL_MAP.items():
            if value == self.level:
                return name.lower()
        return logging.getLevelName(self.level).lower()

    @property
    def enable_color(self) -> bool:
        return current_runtime["use_color"]

    @enable_color.setter
    def enable_color(self, value: bool) -> None:
        current_runtime["use_color"] = value

    def determine_log_level(
        self,
        *,
        args: argparse.Namespace | None = None,
        root_log_level: str | None = None,
    ) -> str:
        """Resolve log level from CLI → env → root config → default."""
        cli_level = getattr(args, "log_level", None)
        if cli_level:
            return str(cli_level)

        env_log_level = os.getenv(f"{PROGRAM_ENV}_LOG_LEVEL") or os.getenv(
            DEFAULT_ENV_LOG_LEVEL
        )
        if env_log_level:
            return env_log_level

        if root_log_level:
            return root_log_level

        return DEFAULT_LOG_LEVEL

    def determine_color_enabled(self) -> bool:
        return should_use_color()

    def setLevel(self, level: int | str) -> None:  # noqa: N802
        """Accept our level names (including trace/silent) as well as ints."""
        if isinstance(level, str):
            name = level.upper()
            if name not in LEVEL_MAP:
                xmsg = f"Unknown log level: {level!r}"
                raise ValueError(xmsg)
            current_runtime["log_level"] = name.lower()
            level = LEVEL_MAP[name]
        super().setLevel(level)

    def error_if_not_debug(self, msg: str, *args: Any) -> None:
        """Log an error, with the traceback only when debugging."""
        if self.isEnabledFor(logging.DEBUG):
            self.exception(msg, *args)
        else:
            self.error(msg, *args)

    def critical_if_not_debug(self, msg: str, *args: Any) -> None:
        """Log a critical error, with the traceback only when debugging."""
        if self.isEnabledFor(logging.DEBUG):
            self.critical(msg, *args, exc_info=True)
        else:
            self.critical(msg, *args)


logging.addLevelName(TRACE_LEVEL, "TRACE")


# --- Tag formatter ---------------------------------------------------------


class TagFormatter(logging.Formatter):
    def format(self: "TagFormatter", record: logging.LogRecord) -> str:
        tag_color, tag_text = TAG_STYLES.get(record.levelname, ("", ""))
        msg = super().format(record)
        if tag_text:
            use_color = current_runtime.get("use_color", True)
            if use_color and tag_color:
                prefix = f"{tag_color}{tag_text}{RESET}"
            else:
                prefix = tag_text
            return f"{prefix} {msg}"
        return msg


# --- DualStreamHandler ---------------------------------------------------------


class DualStreamHandler(logging.StreamHandler[TextIO]):
    """Send info/debug/trace to stdout, everything else to stderr."""

    def __init__(self) -> None:
        # default to stdout, overridden per record
        super().__init__(stream=sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        level = record.levelno
        if level >= logging.WARNING:
            self.stream = sys.stderr
        else:
            self.stream = sys.stdout
        super().emit(record)


# --- Logger initialization ---------------------------------------------------


def _make_logger() -> AppLogger:
    previous = logging.getLoggerClass()
    logging.setLoggerClass(AppLogger)
    try:
        return cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))
    finally:
        logging.setLoggerClass(previous)


_logger = _make_logger()


def _ensure_logger_initialized() -> None:
    """Configure the logger once."""
    if getattr(_ensure_logger_initialized, "_done", False):
        return

    handler = DualStreamHandler()
    handler.setFormatter(TagFormatter("%(message)s"))
    _logger.addHandler(handler)

    _logger.propagate = False  # don’t double-log through root logger
    _ensure_logger_initialized._done = True  # type: ignore[attr-defined]  # noqa: SLF001


def _set_logger_level_from_runtime() -> None:
    """Sync the internal logger level with runtime/env settings."""
    _ensure_logger_initialized()
    level_name = current_runtime.get("log_level")

    if level_name is None:  # pyright: ignore[reportUnnecessaryComparison]
        safe_log("[LOGGER ERROR] ❌ Runtime does not specify log_level")
        level_name = "ERROR"

    level_name = str(level_name).upper()
    logging.Logger.setLevel(_logger, LEVEL_MAP.get(level_name, logging.INFO))


def get_logger() -> AppLogger:
    """Return the configured compile_script logger."""
    _ensure_logger_initialized()
    _set_logger_level_from_runtime()
    return _logger

