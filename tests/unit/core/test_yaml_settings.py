"""Tests for YAML loading, includes and deep merge."""

import sys

import pytest

from graphdrop.core.config import State
from graphdrop.core.yaml_settings import YamlWithIncludesSettingsSource


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv."""
    original = sys.argv.copy()
    sys.argv = ["graphdrop"]
    yield
    sys.argv = original


def test_deep_merge_override_wins(mock_argv):
    source = YamlWithIncludesSettingsSource(State)

    base = {"config": {"repo": {"workdir": "/a"}, "session_name": "base"}}
    override = {"config": {"session_name": "override"}}

    result = source._deep_merge(base, override)

    assert result["config"]["session_name"] == "override"
    assert result["config"]["repo"]["workdir"] == "/a"


def test_deep_merge_adds_new_keys(mock_argv):
    source = YamlWithIncludesSettingsSource(State)

    result = source._deep_merge(
        {"config": {"commands": {"jj": {"abandon_revisions": "jj abandon {ids}"}}}},
        {"config": {"commands": {"git": {"status": "git status"}}}},
    )

    assert "jj" in result["config"]["commands"]
    assert "git" in result["config"]["commands"]


def test_package_defaults_always_load(mock_argv, tmp_path):
    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(tmp_path / "missing.yaml")
    )

    data = source()

    assert data["config"]["dispatch"]["executor"] == "dry-run"
    assert "rebase_revision" in data["config"]["commands"]["jj"]


def test_include_directive(mock_argv, tmp_path):
    """A file's own values win over the files it includes."""
    (tmp_path / "shared.yaml").write_text(
        "config:\n  session_name: shared\n  repo:\n    workdir: /shared\n"
    )
    (tmp_path / "project.yaml").write_text(
        "include: shared.yaml\nconfig:\n  session_name: project\n"
    )

    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(tmp_path / "project.yaml")
    )
    data = source()

    assert data["config"]["session_name"] == "project"
    assert data["config"]["repo"]["workdir"] == "/shared"


def test_cli_include_wins(mock_argv, tmp_path):
    (tmp_path / "project.yaml").write_text("config:\n  session_name: project\n")
    (tmp_path / "extra.yaml").write_text("config:\n  session_name: extra\n")
    sys.argv = ["graphdrop", "--include", str(tmp_path / "extra.yaml")]

    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(tmp_path / "project.yaml")
    )

    assert source()["config"]["session_name"] == "extra"


def test_circular_include(mock_argv, tmp_path):
    (tmp_path / "a.yaml").write_text("include: b.yaml\n")
    (tmp_path / "b.yaml").write_text("include: a.yaml\n")

    with pytest.raises(ValueError, match="Circular include"):
        YamlWithIncludesSettingsSource(State, yaml_file=str(tmp_path / "a.yaml"))
