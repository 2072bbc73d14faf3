# src/compile_script/cli.py

import argparse
import platform
import sys
from difflib import get_close_matches
from pathlib import Path

from .actions import get_metadata, run_selftest
from .build import run_compile
from .config import load_and_validate_config, resolve_config
from .constants import DEFAULT_OUT_DIR, DEFAULT_TARGET_SHELL
from .logs import LEVEL_ORDER, get_logger
from .meta import (
    DESCRIPTION,
    PROGRAM_DISPLAY,
    PROGRAM_SCRIPT,
)
from .utils import safe_log

# argument errors share the generic failure code
ARG_ERROR_CODE = 1


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # Argparse message for bad flags is typically
        # "unrecognized arguments: --forse ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            # Split conservatively on whitespace
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        # Print usage + the original error
        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(ARG_ERROR_CODE, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(prog=PROGRAM_SCRIPT, description=DESCRIPTION)

    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="FILE",
        help="Shell script to compile.",
    )

    # --- Compile options ---
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        default=None,
        help="Overwrite the compiled file if it exists.",
    )
    parser.add_argument(
        "-o",
        "--output-name",
        metavar="NAME",
        help="Name of the compiled script (default: same as the input script).",
    )
    parser.add_argument(
        "-s",
        "--target-shell",
        metavar="SHELL",
        help=(
            "Shell the compiled script runs under"
            f" (default: {DEFAULT_TARGET_SHELL})."
        ),
    )
    parser.add_argument(
        "--out-dir",
        metavar="DIR",
        help=f"Directory for compiled scripts (default: {DEFAULT_OUT_DIR}).",
    )
    parser.add_argument("-c", "--config", help="Path to config file.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compile without writing the output file.",
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    parser.add_argument(
        "--selftest",
        action="store_true",
        help="Run a built-in sanity test to verify tool correctness.",
    )
    return parser


def _single_input(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Require exactly one positional FILE and store it as args.input."""
    inputs: list[str] = getattr(args, "inputs", [])
    if not inputs:
        parser.error("No input file given")
    if len(inputs) > 1:
        parser.error(f"Too many arguments: {' '.join(inputs)}")
    args.input = inputs[0]


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = get_logger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        logger.setLevel(logger.determine_log_level(args=args))
        logger.enable_color = (
            args.use_color
            if args.use_color is not None
            else logger.determine_color_enabled()
        )
        logger.trace("[BOOT] log-level initialized: %s", logger.level_name)

        logger.debug(
            "Runtime: Python %s (%s)\n    %s",
            platform.python_version(),
            platform.python_implementation(),
            sys.version.replace("\n", " "),
        )

        # --- Version flag ---
        if args.version:
            meta = get_metadata()
            logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
            return 0

        # --- Self-test mode ---
        if args.selftest:
            return 0 if run_selftest() else 1

        _single_input(args, parser)
        cwd = Path.cwd().resolve()

        # --- Load configuration ---
        root_cfg = load_and_validate_config(args, cwd)
        logger.setLevel(
            logger.determine_log_level(
                args=args, root_log_level=root_cfg.get("log_level")
            )
        )
        logger.trace(
            "[CONFIG] log-level re-resolved from config: %s", logger.level_name
        )

        options = resolve_config(args, root_cfg, cwd)

        if options["dry_run"]:
            logger.info("🧪 Dry-run mode: the compiled file will not be written.")

        run_compile(options)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.error_if_not_debug(str(e))
            except Exception:  # noqa: BLE001
                safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)

    else:
        return 0
