# src/compile_script/expand.py
"""Recursive inlining of imported shell files.

Each file is read once per compile. Its canonical path enters the visited
set *before* its content is expanded, so a file importing itself (directly
or through others) is caught on re-entry and replaced by a placeholder.
Shared dependencies are inlined once, at their first depth-first occurrence.
"""

import errno
from collections.abc import Iterator
from pathlib import Path

from .classify import (
    Blank,
    ImportDirective,
    Plain,
    Shebang,
    classify_line,
    is_load_statement,
)
from .constants import SCRIPT_ENCODING, SCRIPT_ENCODING_ERRORS
from .logs import get_logger
from .validate import NOT_A_FILE, NOT_FOUND, NOT_READABLE


class VisitedSet:
    """Ordered set of canonical paths already inlined in one compile."""

    def __init__(self) -> None:
        self._paths: dict[Path, None] = {}

    def add(self, path: Path) -> None:
        self._paths[path] = None

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"VisitedSet({[str(p) for p in self._paths]})"


class IncludeError(RuntimeError):
    """An imported file could not be read; the whole compile is aborted."""

    def __init__(
        self,
        path: Path,
        reason: str,
        *,
        imported_from: Path | None = None,
        code: int = 1,
    ) -> None:
        where = f" (imported from {imported_from})" if imported_from else ""
        super().__init__(f"Cannot read {path}{where}: {reason}")
        self.path = path
        self.imported_from = imported_from
        self.code = code


def boundary(tag: str, rel_path: str) -> str:
    return f"### {tag:>5} ### {rel_path}"


def already_included(rel_path: str) -> str:
    return f"# Source file {rel_path} already included above"


def _error_code(e: OSError) -> int:
    if isinstance(e, FileNotFoundError):
        return NOT_FOUND
    if isinstance(e, PermissionError):
        return NOT_READABLE
    if isinstance(e, IsADirectoryError) or e.errno == errno.EISDIR:
        return NOT_A_FILE
    return 1


def read_lines(path: Path, *, imported_from: Path | None = None) -> list[str]:
    """Split `path` on newlines only; undecodable bytes survive the round trip."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise IncludeError(
            path,
            e.strerror or str(e),
            imported_from=imported_from,
            code=_error_code(e),
        ) from e

    text = data.decode(SCRIPT_ENCODING, errors=SCRIPT_ENCODING_ERRORS)
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _expand_into(
    path: Path,
    visited: VisitedSet,
    out: list[str],
    *,
    imported_from: Path | None = None,
) -> None:
    logger = get_logger()
    lines = read_lines(path, imported_from=imported_from)
    it = iter(enumerate(lines, 1))

    for lineno, line in it:
        logger.trace("[EXPAND] %s:%d %r", path.name, lineno, line)
        kind = classify_line(line)

        if isinstance(kind, (Shebang, Blank)):
            continue

        if isinstance(kind, Plain):
            out.append(kind.text)
            continue

        assert isinstance(kind, ImportDirective)  # noqa: S101
        # the line after a marker is its load statement; always consumed
        load = next(it, None)
        if load is None or not is_load_statement(load[1]):
            logger.warning(
                "Expected source statement after import marker in %s:%d."
                " Importing %s anyway, file may not work",
                path,
                lineno,
                kind.path,
            )

        target = (path.parent / kind.path).resolve()
        if target in visited:
            logger.debug("Skipping %s (already included)", kind.path)
            out.append(already_included(kind.path))
            continue

        visited.add(target)
        logger.debug("Inlining %s", kind.path)
        out.append(boundary("START", kind.path))
        _expand_into(target, visited, out, imported_from=path)
        out.append(boundary("END", kind.path))


def expand_file(path: Path | str, visited: VisitedSet | None = None) -> list[str]:
    """Return the lines of `path` with every import inlined.

    `visited` carries state between calls; pass the same set to continue a
    compile, or leave it out to start a fresh one.
    """
    if visited is None:
        visited = VisitedSet()

    source = Path(path).resolve()
    visited.add(source)

    out: list[str] = []
    _expand_into(source, visited, out)
    return out
