"""Tests for configuration loading and template substitution."""

import sys
from pathlib import Path

import pytest

from graphdrop.core.config import State


@pytest.fixture
def load_state(monkeypatch, tmp_path):
    """Load State from tmp_path with an empty command line."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["graphdrop"])
    return State


def test_defaults(test_state):
    config = test_state.config

    assert config.dispatch.executor == "dry-run"
    assert config.session_name == "default"
    assert config.logger.file.enabled is False
    assert set(config.commands["jj"]) == {
        "rebase_revision",
        "insert_revision",
        "extend_parents",
        "replace_parents",
        "abandon_revisions",
        "move_changes",
        "copy_changes",
        "move_branch",
    }


def test_command_placeholders_survive(test_state):
    """Single-word placeholders are left for the executor to fill."""
    template = test_state.config.commands["jj"]["abandon_revisions"]

    assert template == "jj abandon {ids}"


def test_project_file(load_state, tmp_path):
    (tmp_path / "graphdrop.yaml").write_text(
        "config:\n"
        "  session_name: review\n"
        "  dispatch:\n"
        "    executor: jj\n"
    )

    state = load_state()

    assert state.config.session_name == "review"
    assert state.config.dispatch.executor == "jj"


def test_environment_override(load_state, monkeypatch):
    monkeypatch.setenv("GRAPHDROP_CONFIG__DISPATCH__EXECUTOR", "jj")

    assert load_state().config.dispatch.executor == "jj"


def test_templates_substituted(load_state, tmp_path):
    (tmp_path / "graphdrop.yaml").write_text(
        "config:\n"
        "  repo:\n"
        "    workdir: /work/repo\n"
        "  commands:\n"
        "    jj:\n"
        "      abandon_revisions: 'jj -R {config.repo.workdir} abandon {ids}'\n"
    )

    state = load_state()

    assert state.config.commands["jj"]["abandon_revisions"] == (
        f"jj -R {Path('/work/repo')} abandon {{ids}}"
    )


def test_invalid_executor(load_state, tmp_path):
    (tmp_path / "graphdrop.yaml").write_text(
        "config:\n  dispatch:\n    executor: ftp\n"
    )

    with pytest.raises(ValueError):
        load_state()


def test_runtime_starts_pending(test_state):
    assert test_state.runtime.drop.status == "pending"
    assert test_state.runtime.drop.request is None
