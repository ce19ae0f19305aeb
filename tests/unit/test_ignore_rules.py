"""Tests for layered ignore-rule resolution."""

import logging

from memo8.core.config import IndexingConfig
from memo8.core.ignore_rules import IgnoreRule, IgnoreRuleSet, load_ignore_file

DEFAULTS = IndexingConfig().default_ignore_patterns
IGNORE_FILES = [".gitignore", ".memo8ignore"]


def test_defaults_cover_dependencies_vcs_env_and_local_config(tmp_path):
    rules = IgnoreRuleSet.for_root(tmp_path, DEFAULTS, IGNORE_FILES)

    assert rules.is_ignored("node_modules", is_dir=True)
    assert rules.is_ignored(".git", is_dir=True)
    assert rules.is_ignored("packages/web/dist", is_dir=True)
    assert rules.is_ignored(".env")
    assert rules.is_ignored(".env.production")
    assert rules.is_ignored(".memo8.json")
    assert rules.is_ignored("assets/logo.png")
    assert rules.is_ignored("yarn.lock")
    assert not rules.is_ignored("src/app.ts")
    assert not rules.is_ignored("src", is_dir=True)


def test_negation_in_tool_ignore_file_reincludes_default_exclusion(tmp_path):
    (tmp_path / ".memo8ignore").write_text("!*.map\n", encoding="utf-8")

    rules = IgnoreRuleSet.for_root(tmp_path, DEFAULTS, IGNORE_FILES)

    assert not rules.is_ignored("static/app.js.map")


def test_tool_ignore_file_overrides_gitignore(tmp_path):
    (tmp_path / ".gitignore").write_text("docs\n", encoding="utf-8")
    (tmp_path / ".memo8ignore").write_text("!docs\n", encoding="utf-8")

    rules = IgnoreRuleSet.for_root(tmp_path, [], IGNORE_FILES)

    assert not rules.is_ignored("docs", is_dir=True)


def test_gitignore_patterns_apply_after_defaults(tmp_path):
    (tmp_path / ".gitignore").write_text("# generated\n\ncoverage\n*.log\n", encoding="utf-8")

    rules = IgnoreRuleSet.for_root(tmp_path, DEFAULTS, IGNORE_FILES)

    assert rules.rule_count == len(DEFAULTS) + 2
    assert rules.rules[-1].source == ".gitignore"
    assert rules.is_ignored("coverage", is_dir=True)
    assert rules.is_ignored("logs/server.log")


def test_directory_only_pattern_matches_directories_only(tmp_path):
    (tmp_path / ".gitignore").write_text("logs/\n", encoding="utf-8")

    rules = IgnoreRuleSet.for_root(tmp_path, [], IGNORE_FILES)

    assert rules.is_ignored("logs", is_dir=True)
    assert not rules.is_ignored("logs", is_dir=False)


def test_missing_ignore_files_leave_only_defaults(tmp_path):
    rules = IgnoreRuleSet.for_root(tmp_path, ["build"], IGNORE_FILES)

    assert rules.rule_count == 1
    assert rules.rules[0].source == "<defaults>"


def test_empty_rule_set_ignores_nothing():
    rules = IgnoreRuleSet()

    assert not rules.is_ignored("anything/at/all.txt")


def test_root_itself_is_never_ignored(tmp_path):
    rules = IgnoreRuleSet.for_root(tmp_path, ["*"], IGNORE_FILES)

    assert not rules.is_ignored("", is_dir=True)
    assert not rules.is_ignored(".", is_dir=True)


def test_backslash_separators_are_normalized(tmp_path):
    rules = IgnoreRuleSet.for_root(tmp_path, ["vendor"], IGNORE_FILES)

    assert rules.is_ignored("lib\\vendor\\x.php")


def test_invalid_utf8_ignore_file_is_skipped_with_warning(tmp_path, caplog):
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_bytes(b"\xff\xfe invalid\n")

    with caplog.at_level(logging.WARNING):
        patterns = load_ignore_file(ignore_file)

    assert patterns == []
    assert any("Invalid UTF-8 encoding" in record.message for record in caplog.records)


def test_negation_and_directory_flags_are_reported():
    assert IgnoreRule("!keep.txt", ".memo8ignore").negation
    assert IgnoreRule("out/", ".gitignore").directory_only
    assert not IgnoreRule("*.log", ".gitignore").negation
