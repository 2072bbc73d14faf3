# src/compile_script/actions.py
import re
import shutil
import subprocess
import tempfile
from contextlib import suppress
from pathlib import Path

from .build import assemble
from .expand import already_included, boundary
from .logs import get_logger
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT, Metadata


def get_metadata() -> Metadata:
    """Return version and commit for this tool.

    Version comes from pyproject.toml next to the source tree, the commit
    from git; either falls back to "unknown".
    """
    logger = get_logger()
    version = "unknown"
    commit = "unknown"

    root = Path(__file__).resolve().parents[2]
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        logger.trace("trying to read metadata from %s", pyproject)
        text = pyproject.read_text(encoding="utf-8")
        match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
        if match:
            version = match.group(1)

    # Try git for commit
    with suppress(Exception):
        logger.trace("trying to get commit from git")
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip() or "unknown"

    logger.trace("got package version %s with commit %s", version, commit)
    return Metadata(version, commit)


def run_selftest() -> bool:
    """Compile a tiny two-file script in a temp dir and check the result."""
    logger = get_logger()
    logger.info("🧪 Running self-test...")

    tmp_dir: Path | None = None
    try:
        tmp_dir = Path(tempfile.mkdtemp(prefix=f"{PROGRAM_SCRIPT}-selftest-"))
        (tmp_dir / "lib").mkdir()

        lib = tmp_dir / "lib" / "hello.sh"
        lib.write_text(f'hello() {{ echo "hello {PROGRAM_DISPLAY}!"; }}\n')
        main = tmp_dir / "main.sh"
        main.write_text(
            "#!/bin/sh\n"
            "# shellcheck source=lib/hello.sh\n"
            'source "$(dirname "$0")/lib/hello.sh"\n'
            "# shellcheck source=lib/hello.sh\n"
            'source "$(dirname "$0")/lib/hello.sh"\n'
            "hello\n",
            encoding="utf-8",
        )
        dest = tmp_dir / "dist" / "main.sh"

        logger.debug("[SELFTEST] using temp dir: %s", tmp_dir)

        assemble(main, "bash", dest=dest)

        expected = [
            "#!/usr/bin/env bash",
            boundary("START", "lib/hello.sh"),
            f'hello() {{ echo "hello {PROGRAM_DISPLAY}!"; }}',
            boundary("END", "lib/hello.sh"),
            already_included("lib/hello.sh"),
            "hello",
        ]
        if dest.exists() and dest.read_text(encoding="utf-8").splitlines() == expected:
            logger.info(
                "✅ Self-test passed — %s is working correctly.", PROGRAM_DISPLAY
            )
            return True

        logger.error("Self-test failed: compiled output missing or invalid.")
        return False

    except PermissionError:
        logger.error("Self-test failed: insufficient permissions.")  # noqa: TRY400
        return False
    except FileNotFoundError:
        logger.error("Self-test failed: missing file or directory.")  # noqa: TRY400
        return False
    except Exception:
        # Unexpected bug — show traceback and ask for a bug report
        logger.exception(
            "Unexpected self-test failure. "
            "Please report this issue with the following traceback:"
        )
        return False

    finally:
        if tmp_dir and tmp_dir.exists():
            shutil.rmtree(tmp_dir, ignore_errors=True)
