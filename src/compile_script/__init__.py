# src/compile_script/__init__.py

"""Compile Script — inline sourced shell libraries into one script.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or custom integrations.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()            → CLI entrypoint
    - run_compile()     → Validate, collision-check and compile one script
    - assemble()        → Compile a script to a destination path
    - expand_file()     → Inline every import of a script, as lines
    - classify_line()   → Recognize shebang / blank / import / plain lines
    - validate_path()   → Ordered path checks with exit codes
"""

from .actions import get_metadata, run_selftest
from .build import (
    DestinationExistsError,
    assemble,
    check_collision,
    compute_dest,
    render_header,
    run_compile,
    scratch_file,
)
from .classify import (
    Blank,
    ImportDirective,
    Line,
    Plain,
    Shebang,
    classify_line,
    is_load_statement,
    match_marker,
)
from .cli import main
from .config import (
    find_config,
    load_and_validate_config,
    load_config,
    resolve_config,
    validate_config,
)
from .constants import (
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_FORCE,
    DEFAULT_INPUT_CHECKS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUT_DIR,
    DEFAULT_TARGET_SHELL,
)
from .expand import (
    IncludeError,
    VisitedSet,
    already_included,
    boundary,
    expand_file,
)
from .logs import (
    LEVEL_ORDER,
    RESET,
    get_logger,
)
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .runtime import current_runtime
from .types import CompileOptions, RootConfig, RootConfigInput, Runtime
from .utils import load_jsonc, should_use_color
from .validate import PathValidationError, require_path, validate_path


__all__ = [  # noqa: RUF022
    # --- CLI / Actions ---
    "get_metadata",
    "main",
    "run_selftest",
    #
    # --- Compile Engine ---
    "already_included",
    "assemble",
    "boundary",
    "check_collision",
    "classify_line",
    "compute_dest",
    "expand_file",
    "is_load_statement",
    "match_marker",
    "render_header",
    "require_path",
    "run_compile",
    "scratch_file",
    "validate_path",
    #
    # --- Config Handling ---
    "find_config",
    "load_and_validate_config",
    "load_config",
    "resolve_config",
    "validate_config",
    #
    # --- Constants / Metadata / Runtime ---
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_FORCE",
    "DEFAULT_INPUT_CHECKS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_OUT_DIR",
    "DEFAULT_TARGET_SHELL",
    "Metadata",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "current_runtime",
    #
    # --- utils ---
    "LEVEL_ORDER",
    "RESET",
    "get_logger",
    "load_jsonc",
    "should_use_color",
    #
    # --- Types / Errors ---
    "Blank",
    "CompileOptions",
    "DestinationExistsError",
    "ImportDirective",
    "IncludeError",
    "Line",
    "PathValidationError",
    "Plain",
    "RootConfig",
    "RootConfigInput",
    "Runtime",
    "Shebang",
    "VisitedSet",
]
