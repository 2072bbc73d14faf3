# compile_script/runtime.py
"""Holds live runtime context shared across modules (e.g., log level, color flags)."""

import os

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV
from .types import Runtime
from .utils import should_use_color


def _initial_log_level() -> str:
    return (
        os.getenv(f"{PROGRAM_ENV}_LOG_LEVEL")
        or os.getenv(DEFAULT_ENV_LOG_LEVEL)
        or DEFAULT_LOG_LEVEL
    )


current_runtime: Runtime = {
    "log_level": _initial_log_level(),
    "use_color": should_use_color(),
}
