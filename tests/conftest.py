"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Generator

import pytest

import modkeeper.utils.console as console_module
import modkeeper.utils.logger as logger_module


@pytest.fixture(autouse=True)
def reset_modkeeper_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Undo logging, console and NO_COLOR changes made by CLI invocations."""
    # setenv first so the original value is restored even if a test sets it
    monkeypatch.setenv("NO_COLOR", "")
    monkeypatch.delenv("NO_COLOR")
    yield

    root_logger = logging.getLogger(logger_module.ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    console_module.reconfigure_console()


@pytest.fixture
def sample_gomod() -> str:
    """A go.mod with direct, indirect and skipped entries."""
    return """module example.com/app

go 1.22

toolchain go1.22.3

require github.com/single/line v1.0.0

require (
\tgithub.com/spf13/cobra v1.8.0
\tgolang.org/x/text v0.14.0
\tgolang.org/x/sys v0.15.0 // indirect
)

replace github.com/old/mod => github.com/new/mod v1.2.3

exclude (
\tgithub.com/bad/mod v0.1.0
)
"""


@pytest.fixture
def gomod_file(tmp_path: Path, sample_gomod: str) -> Path:
    """Write :func:`sample_gomod` to a temporary ``go.mod``."""
    path = tmp_path / "go.mod"
    path.write_text(sample_gomod, encoding="utf-8")
    return path
