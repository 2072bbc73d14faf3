# src/compile_script/types.py
from __future__ import annotations

from pathlib import Path
from typing import TypedDict

from typing_extensions import NotRequired


class RootConfigInput(TypedDict, total=False):
    """Raw shape of a `.compile-script.json(c)` file."""

    out_dir: str
    target_shell: str
    force: bool
    log_level: str


class RootConfig(TypedDict):
    out_dir: str
    target_shell: str
    force: bool
    log_level: NotRequired[str]

    # directory relative paths in the config resolve against
    config_base: Path


class CompileOptions(TypedDict):
    input: Path  # as given on the command line
    dest: Path  # absolute destination of the compiled script
    target_shell: str
    force: bool
    dry_run: bool
    log_level: NotRequired[str]


class Runtime(TypedDict):
    log_level: str
    use_color: bool
