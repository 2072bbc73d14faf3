# src/compile_script/utils.py
"""Small helpers shared by the config loader, the logger and the CLI."""

import json
import os
import re
import sys
from contextlib import suppress
from pathlib import Path
from typing import Any, TextIO, cast

# line and block comments outside of quoted URLs, then trailing commas
_JSONC_LINE_COMMENT = re.compile(r'(?<!["\'])\s*(?<!:)//.*|(?<!["\'])\s*#.*')
_JSONC_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_JSONC_TRAILING_COMMA = re.compile(r",(?=\s*[}\]])")

_TRUTHY = {"1", "true", "yes"}


def should_use_color() -> bool:
    """Colour unless NO_COLOR is set; FORCE_COLOR wins over tty detection."""
    if "NO_COLOR" in os.environ:
        return False
    if os.getenv("FORCE_COLOR", "").lower() in _TRUTHY:
        return True
    return sys.stdout.isatty()


def strip_jsonc(text: str) -> str:
    """Reduce JSONC text (comments, trailing commas) to plain JSON."""
    text = _JSONC_LINE_COMMENT.sub("", text)
    text = _JSONC_BLOCK_COMMENT.sub("", text)
    text = _JSONC_TRAILING_COMMA.sub("", text)
    return text.strip()


def load_jsonc(path: Path) -> dict[str, Any] | None:
    """Load a JSONC object from `path`.

    Returns None when the file holds nothing but comments or whitespace.
    Raises FileNotFoundError for a missing file and ValueError for a
    directory, a syntax error, or a root that is not an object.
    """
    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)
    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = strip_jsonc(path.read_text(encoding="utf-8"))
    if not text:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    if not isinstance(data, dict):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004

    return cast("dict[str, Any]", data)


def remove_path_in_error_message(inner_msg: str, path: Path) -> str:
    """Drop mentions of `path` from a wrapped error message.

    "Invalid JSONC syntax in /abs/.compile-script.jsonc: Expecting value"
    becomes "Invalid JSONC syntax: Expecting value".
    """
    msg = inner_msg
    for name in (str(path), path.name):
        for mention in (f"in {name}", f"in '{name}'", f'in "{name}"', name):
            msg = msg.replace(mention, "").strip(": ").strip()

    msg = re.sub(r"\s{2,}", " ", msg)
    return re.sub(r"\s*:\s*", ": ", msg)


def plural(obj: Any) -> str:
    """'s' unless `obj` (a count or a sized object) is exactly one."""
    try:
        count = len(obj)
    except TypeError:
        count = obj if isinstance(obj, (int, float)) else 0
    return "" if count == 1 else "s"


def safe_log(msg: str) -> None:
    """Write `msg` to the real stderr without ever raising."""
    stream = cast("TextIO", sys.__stderr__)
    try:
        print(msg, file=stream)
    except Exception:  # noqa: BLE001
        with suppress(Exception):
            stream.write(f"[INTERNAL] {msg}\n")
