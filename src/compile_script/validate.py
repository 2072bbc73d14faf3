# src/compile_script/validate.py
"""Path checks with distinct exit codes, one letter per predicate.

The flag string is evaluated left to right and stops at the first failure:

    e  exists              10
    r  readable            11
    f  regular file        12
    d  directory           12
    s  non-empty           13
    w  writable            14
    x  executable          15

An empty path fails with NO_INPUT before any predicate runs.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_INPUT_CHECKS
from .logs import get_logger

OK = 0
NO_INPUT = 1
NOT_FOUND = 10
NOT_READABLE = 11
NOT_A_FILE = 12
NOT_A_DIRECTORY = 12
EMPTY = 13
NOT_WRITABLE = 14
NOT_EXECUTABLE = 15


def _is_non_empty(path: Path) -> bool:
    try:
        return path.stat().st_size > 0
    except OSError:
        return False


_PREDICATES: dict[str, tuple[Callable[[Path], bool], int, str]] = {
    "e": (Path.exists, NOT_FOUND, "File does not exist"),
    "r": (lambda p: os.access(p, os.R_OK), NOT_READABLE, "File is not readable"),
    "f": (Path.is_file, NOT_A_FILE, "File is not a regular file"),
    "d": (Path.is_dir, NOT_A_DIRECTORY, "File is not a directory"),
    "s": (_is_non_empty, EMPTY, "File is empty"),
    "w": (lambda p: os.access(p, os.W_OK), NOT_WRITABLE, "File is not writable"),
    "x": (
        lambda p: os.access(p, os.X_OK),
        NOT_EXECUTABLE,
        "File is not executable",
    ),
}


class PathValidationError(ValueError):
    """A path failed one of the validator predicates.

    `silent` is set when the validator has already printed the message, so
    the CLI reports only the exit code.
    """

    def __init__(
        self,
        path: Path | str,
        code: int,
        message: str,
        *,
        silent: bool = False,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.code = code
        self.silent = silent


def _first_failure(path: Path | str | None, flags: str) -> tuple[int, str]:
    if path is None or str(path) == "":
        return NO_INPUT, "No input file given"

    target = Path(path)
    for flag in flags:
        entry = _PREDICATES.get(flag)
        if entry is None:
            # unknown flag ends the check sequence
            get_logger().trace("[VALIDATE] stopping at unknown flag %r", flag)
            break

        predicate, code, message = entry
        if not predicate(target):
            return code, f"{message}: {path}"
        get_logger().trace("[VALIDATE] %s passed -%s", path, flag)

    return OK, ""


def validate_path(
    path: Path | str | None,
    flags: str = DEFAULT_INPUT_CHECKS,
    *,
    quiet: bool = False,
) -> int:
    """Check `path` against `flags` in order; return 0 or the failing code."""
    code, message = _first_failure(path, flags)
    if code != OK and not quiet:
        get_logger().info(message)
    return code


def require_path(path: Path | str | None, flags: str = DEFAULT_INPUT_CHECKS) -> Path:
    """Like validate_path(), but raise PathValidationError on failure."""
    code, message = _first_failure(path, flags)
    if code != OK:
        logger = get_logger()
        shown = logger.isEnabledFor(logging.INFO)
        if shown:
            logger.info(message)
        raise PathValidationError(path or "", code, message, silent=shown)
    return Path(path)  # type: ignore[arg-type]
