"""Pytest configuration and fixtures for graphdrop tests."""

import hashlib
import sys
import tempfile
from pathlib import Path

import pytest

from graphdrop.core.log import ConsoleSink, setup_logger
from graphdrop.model import (
    ChangeId,
    CommitId,
    Description,
    RevHeader,
    RevId,
)


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging at debug level; nothing leaves the machine."""
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "graphdrop-tests",
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture(scope="session")
def test_state():
    """State loaded from package defaults without CLI parsing conflicts.

    sys.argv is swapped out because State parses CLI arguments and
    would otherwise see pytest's.
    """
    from graphdrop.core.config import State

    old_argv = sys.argv
    sys.argv = ['graphdrop']

    try:
        return State()
    finally:
        sys.argv = old_argv


def rev_id(name: str) -> RevId:
    """Deterministic identity pair for a revision called name."""
    change = (name * 32)[:32]
    commit = hashlib.sha1(name.encode()).hexdigest()
    return RevId(
        change=ChangeId.from_hex(change),
        commit=CommitId.from_hex(commit),
    )


@pytest.fixture
def make_header():
    """Factory for revision headers.

    make_header("x", parents=[p]) builds a header whose change id
    prefix is "xxxxxxxx" and whose parents are the given headers.
    """
    def _make(
        name: str,
        parents=(),
        is_immutable: bool = False,
        is_working_copy: bool = False,
        refs=(),
        description: str = "",
    ) -> RevHeader:
        return RevHeader(
            id=rev_id(name),
            description=Description(
                lines=tuple(description.splitlines())
            ),
            is_immutable=is_immutable,
            is_working_copy=is_working_copy,
            refs=tuple(refs),
            parent_ids=tuple(p.id.commit for p in parents),
        )
    return _make


class RecordingChannel:
    """Channel that keeps submitted requests instead of sending them."""

    def __init__(self):
        self.submitted = []

    def submit(self, request):
        self.submitted.append(request)


@pytest.fixture
def channel():
    return RecordingChannel()
