# src/compile_script/config.py


import argparse
from pathlib import Path
from typing import Any

from .build import compute_dest
from .constants import (
    DEFAULT_FORCE,
    DEFAULT_OUT_DIR,
    DEFAULT_TARGET_SHELL,
)
from .logs import LEVEL_ORDER, get_logger
from .meta import PROGRAM_SCRIPT
from .types import CompileOptions, RootConfig, RootConfigInput
from .utils import load_jsonc, plural, remove_path_in_error_message

# key → accepted type
CONFIG_SCHEMA: dict[str, type] = {
    "out_dir": str,
    "target_shell": str,
    "force": bool,
    "log_level": str,
}


def find_config(args: argparse.Namespace, cwd: Path) -> Path | None:
    """Locate a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. Default candidates in the current working directory:
         .{PROGRAM_SCRIPT}.jsonc, .{PROGRAM_SCRIPT}.json

    Returns the first matching path, or None if no config was found.
    """
    logger = get_logger()

    # --- 1. Explicit config path ---
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        if not config.exists():
            # Explicit path → hard failure
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    # --- 2. Default candidate files ---
    candidates: list[Path] = [
        cwd / f".{PROGRAM_SCRIPT}.jsonc",
        cwd / f".{PROGRAM_SCRIPT}.json",
    ]
    found = [p for p in candidates if p.exists()]

    if not found:
        # Expected absence — soft failure (continue)
        logger.trace("No config file found in %s", cwd)
        return None

    if len(found) > 1:
        names = ", ".join(p.name for p in found)
        logger.warning(
            "Multiple config files detected (%s); using %s.", names, found[0].name
        )
    return found[0]


def load_config(config_path: Path) -> dict[str, Any] | None:
    """Load raw configuration data from a JSON/JSONC file.

    Returns None for intentionally empty configs (empty or comment-only).
    """
    try:
        return load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            f"Error while loading configuration file '{config_path.name}': {clean_msg}"
        )
        raise ValueError(xmsg) from e


def validate_config(raw: dict[str, Any], config_path: Path) -> RootConfigInput:
    """Check key types; warn about unknown keys, raise on wrong types."""
    logger = get_logger()

    unknown = sorted(set(raw) - set(CONFIG_SCHEMA))
    if unknown:
        logger.warning(
            "Unknown key%s in %s ignored: %s",
            plural(unknown),
            config_path.name,
            ", ".join(unknown),
        )

    errors: list[str] = []
    for key, expected in CONFIG_SCHEMA.items():
        if key not in raw:
            continue
        value = raw[key]
        if not isinstance(value, expected):
            errors.append(
                f"'{key}' must be {expected.__name__}, not {type(value).__name__}"
            )

    level = raw.get("log_level")
    if isinstance(level, str) and level not in LEVEL_ORDER:
        errors.append(f"'log_level' must be one of {', '.join(LEVEL_ORDER)}")

    if errors:
        xmsg = f"Invalid configuration in {config_path.name}: " + "; ".join(errors)
        raise ValueError(xmsg)

    result: RootConfigInput = {}
    for key in CONFIG_SCHEMA:
        if key in raw:
            result[key] = raw[key]  # type: ignore[literal-required]
    return result


def load_and_validate_config(
    args: argparse.Namespace,
    cwd: Path | None = None,
) -> RootConfig:
    """Find, load and validate the config, filling defaults for missing keys."""
    logger = get_logger()
    cwd = cwd or Path.cwd().resolve()

    config_path = find_config(args, cwd)
    raw = load_config(config_path) if config_path else None
    data: RootConfigInput = (
        validate_config(raw, config_path) if raw and config_path else {}
    )
    if config_path:
        logger.debug("Using config: %s", config_path)

    root: RootConfig = {
        "out_dir": data.get("out_dir", DEFAULT_OUT_DIR),
        "target_shell": data.get("target_shell", DEFAULT_TARGET_SHELL),
        "force": data.get("force", DEFAULT_FORCE),
        "config_base": config_path.parent if config_path else cwd,
    }
    if "log_level" in data:
        root["log_level"] = data["log_level"]
    return root


def resolve_config(
    args: argparse.Namespace,
    root: RootConfig,
    cwd: Path | None = None,
) -> CompileOptions:
    """Merge CLI args over config values into options for one compile."""
    cwd = cwd or Path.cwd().resolve()

    # CLI --out-dir is relative to cwd, config out_dir to the config file
    if getattr(args, "out_dir", None):
        out_base, out_dir = cwd, args.out_dir
    else:
        out_base, out_dir = root["config_base"], root["out_dir"]

    input_path = Path(args.input)
    dest = compute_dest(
        input_path,
        getattr(args, "output_name", None),
        out_dir=out_dir,
        base=out_base,
    )

    options: CompileOptions = {
        "input": input_path,
        "dest": dest,
        "target_shell": getattr(args, "target_shell", None) or root["target_shell"],
        "force": bool(getattr(args, "force", False) or root["force"]),
        "dry_run": bool(getattr(args, "dry_run", False)),
    }
    if "log_level" in root:
        options["log_level"] = root["log_level"]

    get_logger().trace("[CONFIG] resolved options: %s", options)
    return options
