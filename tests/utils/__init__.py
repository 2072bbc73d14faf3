# tests/utils/__init__.py

from .scripts import import_lines, write_script
from .trace import TRACE

__all__ = [
    "TRACE",
    "import_lines",
    "write_script",
]
