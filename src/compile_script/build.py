# src/compile_script/build.py
"""Turn one entry script into a compiled, self-contained file.

The compiled text is written to a scratch file first and only copied to the
destination once expansion has finished, so a failed compile never leaves a
partial output behind.
"""

import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .constants import (
    DEFAULT_OUT_DIR,
    DEFAULT_TARGET_SHELL,
    SCRATCH_PREFIX,
    SCRIPT_ENCODING,
    SCRIPT_ENCODING_ERRORS,
    SCRIPT_SUFFIX,
)
from .expand import VisitedSet, expand_file
from .logs import get_logger
from .types import CompileOptions
from .utils import plural
from .validate import OK, require_path, validate_path


class DestinationExistsError(RuntimeError):
    """The compiled file is already there and --force was not given."""

    code = 1

    def __init__(self, dest: Path) -> None:
        super().__init__(
            f"Compiled file already exists: {dest}. Use -f to overwrite"
        )
        self.dest = dest


# --------------------------------------------------------------------------- #
# internal helpers
# --------------------------------------------------------------------------- #


def _script_name(name: str) -> str:
    """Base name with exactly one trailing .sh."""
    base = Path(name).name
    return f"{base.removesuffix(SCRIPT_SUFFIX)}{SCRIPT_SUFFIX}"


def compute_dest(
    input_path: Path | str,
    output_name: str | None = None,
    *,
    out_dir: Path | str = DEFAULT_OUT_DIR,
    base: Path | None = None,
) -> Path:
    """Return where the compiled script goes.

    The file always lands in `out_dir` (relative to `base`, default cwd).
    Its name is `output_name` if given, else the input's base name; either
    way only the base name is kept and a `.sh` suffix is ensured.
    """
    base = base or Path.cwd()
    name = _script_name(output_name or str(input_path))
    dest = (base / out_dir / name).resolve()
    get_logger().trace(
        "[DEST] input=%s, output_name=%r, out_dir=%s → %s",
        input_path,
        output_name,
        out_dir,
        dest,
    )
    return dest


def check_collision(dest: Path, *, force: bool) -> None:
    logger = get_logger()
    if validate_path(dest, "er", quiet=True) != OK:
        return
    if force:
        logger.debug("Overwriting existing %s (--force)", dest)
        return
    raise DestinationExistsError(dest)


@contextmanager
def scratch_file() -> Iterator[Path]:
    """Yield a temporary file path that is removed however the block exits."""
    fd, name = tempfile.mkstemp(prefix=SCRATCH_PREFIX)
    os.close(fd)
    path = Path(name)
    get_logger().trace("[SCRATCH] created %s", path)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        get_logger().trace("[SCRATCH] removed %s", path)


def render_header(target_shell: str) -> str:
    return f"#!/usr/bin/env {target_shell}"


# --------------------------------------------------------------------------- #
# public API
# --------------------------------------------------------------------------- #


def assemble(
    root_file: Path | str,
    target_shell: str = DEFAULT_TARGET_SHELL,
    *,
    dest: Path,
    dry_run: bool = False,
    visited: VisitedSet | None = None,
) -> Path:
    """Compile `root_file` into `dest` and return `dest`.

    Nothing is written to `dest` unless the whole expansion succeeds.
    """
    logger = get_logger()
    visited = visited if visited is not None else VisitedSet()

    with scratch_file() as scratch:
        with scratch.open(
            "w",
            encoding=SCRIPT_ENCODING,
            errors=SCRIPT_ENCODING_ERRORS,
            newline="",
        ) as fh:
            fh.write(render_header(target_shell) + "\n")
            for line in expand_file(root_file, visited):
                fh.write(line + "\n")

        if dry_run:
            logger.info("🧪 (dry-run) Would write: %s", dest)
            return dest

        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(scratch, dest)

    return dest


def run_compile(options: CompileOptions) -> Path:
    """Validate, collision-check and compile one script."""
    logger = get_logger()

    src = require_path(options["input"]).resolve()
    dest = options["dest"]
    check_collision(dest, force=options["force"])

    logger.debug("Compiling %s → %s (%s)", src, dest, options["target_shell"])
    visited = VisitedSet()
    assemble(
        src,
        options["target_shell"],
        dest=dest,
        dry_run=options["dry_run"],
        visited=visited,
    )

    inlined = len(visited) - 1
    logger.info(
        "✅ Compiled %s → %s (%d file%s inlined)",
        src.name,
        dest,
        inlined,
        plural(inlined),
    )
    return dest
