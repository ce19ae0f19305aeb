"""Tests for resolving `codebase index` input into IndexOptions."""

import pytest

from memo8.cli.options import (
    IndexOptions,
    MissingProjectError,
    OptionsError,
    resolve_index_options,
)
from memo8.core.config import Memo8Config


def _config(project_id=None) -> Memo8Config:
    config = Memo8Config()
    config.project.project_id = project_id
    return config


def _no_prompt():
    raise AssertionError("prompt should not be called")


def test_flag_wins_over_config(tmp_path):
    options = resolve_index_options(tmp_path, 4, False, _config(9), prompt=_no_prompt)

    assert options == IndexOptions(root=tmp_path.resolve(), project_id=4, dry_run=False)


def test_config_supplies_project_when_flag_absent(tmp_path):
    options = resolve_index_options(tmp_path, None, False, _config(9), prompt=_no_prompt)

    assert options.project_id == 9


def test_missing_project_raises_when_not_interactive(tmp_path):
    with pytest.raises(MissingProjectError, match="memo8 init"):
        resolve_index_options(tmp_path, None, False, _config(), prompt=_no_prompt)


def test_interactive_prompt_supplies_project(tmp_path):
    options = resolve_index_options(
        tmp_path, None, False, _config(), interactive=True, prompt=lambda: 11
    )

    assert options.project_id == 11


def test_dry_run_does_not_need_project(tmp_path):
    options = resolve_index_options(tmp_path, None, True, _config(), prompt=_no_prompt)

    assert options.dry_run
    assert options.project_id is None


def test_non_positive_project_is_rejected(tmp_path):
    with pytest.raises(OptionsError, match="Invalid project ID: -2"):
        resolve_index_options(tmp_path, -2, False, _config())


def test_missing_path_is_rejected(tmp_path):
    with pytest.raises(OptionsError, match="does not exist"):
        resolve_index_options(tmp_path / "gone", 1, False, _config())


def test_system_directory_is_rejected():
    with pytest.raises(OptionsError, match="system directories"):
        resolve_index_options("/", 1, False, _config())


def test_relative_path_is_resolved(tmp_path, monkeypatch):
    (tmp_path / "project").mkdir()
    monkeypatch.chdir(tmp_path)

    options = resolve_index_options("project", 1, False, _config())

    assert options.root == (tmp_path / "project").resolve()
