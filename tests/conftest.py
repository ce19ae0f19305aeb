"""Shared fixtures: isolate every test from the user's memo8 config and env."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_memo8_env(tmp_path_factory, monkeypatch):
    """Point the global config dir at an empty temp dir and drop MEMO8_* variables."""
    for key in list(os.environ):
        if key.startswith("MEMO8_"):
            monkeypatch.delenv(key, raising=False)
    global_dir = tmp_path_factory.mktemp("memo8-global")
    monkeypatch.setenv("MEMO8_CONFIG_DIR", str(global_dir))
    return global_dir
