# src/compile_script/classify.py
"""Line-level recognition of shell script content.

Every input line falls into exactly one of four kinds. Import markers are
comments naming a file relative to the script that contains them:

    # shellcheck source=lib/log.sh
    source "$(dirname "$0")/lib/log.sh"

or the namespaced form `#termlibs=lib/log.sh`. The line after a marker is
its load statement (`source ...` or `. ...`).
"""

import re
from dataclasses import dataclass
from typing import Union

SHEBANG_PATTERN = re.compile(r"^#!")

MARKER_PATTERNS = (
    re.compile(r"^\s*#\s*shellcheck\s+(?:[^#]*\s)?source=(?P<path>\S+)"),
    re.compile(r"^\s*#+\s*termlibs=(?P<path>\S+)"),
)

LOAD_STATEMENT_PATTERN = re.compile(r"^\s*(?:source|\.)\s+\S")


@dataclass(frozen=True)
class Shebang:
    text: str


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class ImportDirective:
    path: str  # as written, relative to the importing file
    marker: str  # the annotation line it came from


@dataclass(frozen=True)
class Plain:
    text: str


Line = Union[Shebang, Blank, ImportDirective, Plain]


def _strip_eol(line: str) -> str:
    return line.removesuffix("\n")


def match_marker(line: str) -> str | None:
    """Return the path named by an import marker, or None."""
    for pattern in MARKER_PATTERNS:
        m = pattern.match(line)
        if m:
            return m.group("path")
    return None


def is_load_statement(line: str) -> bool:
    """True if `line` loads another file (`source x` or `. x`)."""
    return bool(LOAD_STATEMENT_PATTERN.match(_strip_eol(line)))


def classify_line(line: str) -> Line:
    text = _strip_eol(line)

    if SHEBANG_PATTERN.match(text):
        return Shebang(text)
    if text == "":
        return Blank()

    path = match_marker(text)
    if path is not None:
        return ImportDirective(path=path, marker=text)

    return Plain(text)
