# src/compile_script/constants.py
"""
Central constants used across the project.
"""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"

# --- config defaults ---
DEFAULT_OUT_DIR: str = "dist"
DEFAULT_TARGET_SHELL: str = "bash"
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_FORCE: bool = False
DEFAULT_INPUT_CHECKS: str = "er"  # exists + readable

# --- output ---
SCRIPT_SUFFIX: str = ".sh"
SCRATCH_PREFIX: str = "compile-script."

# --- script text ---
# bytes that are not UTF-8 pass through unchanged
SCRIPT_ENCODING: str = "utf-8"
SCRIPT_ENCODING_ERRORS: str = "surrogateescape"
