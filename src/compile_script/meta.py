# src/compile_script/meta.py

"""Centralized program identity constants for Compile Script."""

from dataclasses import dataclass

_BASE = "compile-script"

# CLI script name (the executable or `poetry run` entrypoint)
PROGRAM_SCRIPT = _BASE

# Human-readable name for banners, help text, etc.
PROGRAM_DISPLAY = _BASE.replace("-", " ").title()

# Python package / import name
PROGRAM_PACKAGE = _BASE.replace("-", "_")

# Environment variable prefix (used for COMPILE_SCRIPT_LOG_LEVEL, etc.)
PROGRAM_ENV = _BASE.replace("-", "_").upper()

# Short tagline or description for help screens and metadata
DESCRIPTION = "Inline sourced shell libraries into one self-contained script."


@dataclass(frozen=True)
class Metadata:
    """Version and commit of the running tool."""

    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"
