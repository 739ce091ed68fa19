"""Fixtures for command tests."""

import tempfile
from pathlib import Path

import pytest

from graphdrop.core.log import ConsoleSink, setup_logger


@pytest.fixture(autouse=True)
def quiet_console():
    """Keep log lines out of stdout so tests see only command output."""
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "graphdrop-tests",
        session_name="test",
        console=ConsoleSink(enabled=False),
    )
    yield
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "graphdrop-tests",
        session_name="test",
        console=ConsoleSink(level="debug"),
    )
