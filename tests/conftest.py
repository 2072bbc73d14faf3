# tests/conftest.py
"""
Shared test setup for project.

- Resets the live runtime (log level, color) around every test.
- Skips tests marked `debug` unless requested with `-k debug`.
"""

from collections.abc import Generator

import pytest
from pytest import Config, Item as PytestItem

import compile_script.runtime as mod_runtime


@pytest.fixture(autouse=True)
def reset_runtime() -> Generator[None, None, None]:
    """Reset runtime log level and color between tests."""
    prev = dict(mod_runtime.current_runtime)
    mod_runtime.current_runtime["log_level"] = "info"
    mod_runtime.current_runtime["use_color"] = False
    yield
    mod_runtime.current_runtime.update(prev)  # type: ignore[typeddict-item]


def pytest_collection_modifyitems(
    config: Config,
    items: list[PytestItem],
) -> None:
    """Automatically skips debug tests unless asked for."""
    # detect if the user is filtering for debug tests
    keywords = config.getoption("-k") or ""
    running_debug = "debug" in keywords.lower()

    if running_debug:
        return  # user explicitly requested them, don't skip

    for item in items:
        if "debug" in item.keywords:
            item.add_marker(
                pytest.mark.skip(reason="Skipped debug test (use -k debug to run)")
            )
