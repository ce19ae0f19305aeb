"""
Unit tests for FileScanner: directory walk, pruning and file admission.
"""

import hashlib
import os
import sys
from pathlib import Path

import pytest

from memo8.core.config import IndexingConfig
from memo8.core.file_scanner import FileEntry, FileScanner
from memo8.core.file_scanner.scanner import DEFAULT_IGNORE_PATTERNS
from memo8.services import IndexingService
from support.tree_utils import write_tree


def _scanner(**kwargs) -> FileScanner:
    kwargs.setdefault("default_ignore_patterns", IndexingConfig().default_ignore_patterns)
    return FileScanner(**kwargs)


def _rel(paths: list[Path], root: Path) -> list[str]:
    return [p.relative_to(root.resolve()).as_posix() for p in paths]


class TestWalk:
    """Directory traversal, ordering and size limit."""

    def test_walk_is_depth_first_in_name_order(self, tmp_path):
        write_tree(tmp_path, {
            "b.txt": "b",
            "a/x.txt": "x",
            "a/b/y.txt": "y",
            "c/z.txt": "z",
        })

        paths = _scanner().walk(tmp_path)

        assert _rel(paths, tmp_path) == ["b.txt", "a/x.txt", "a/b/y.txt", "c/z.txt"]
        assert all(p.is_absolute() for p in paths)

    def test_walk_skips_files_over_size_limit(self, tmp_path):
        write_tree(tmp_path, {"small.txt": "x" * 10, "big.txt": "x" * 11})

        paths = _scanner(max_file_size=10).walk(tmp_path)

        assert _rel(paths, tmp_path) == ["small.txt"]

    def test_walk_applies_gitignore_and_memo8ignore(self, tmp_path):
        write_tree(tmp_path, {
            ".gitignore": "secret.txt\n",
            ".memo8ignore": "fixtures/\n!bundle.js.map\n",
            "secret.txt": "s",
            "fixtures/data.json": "{}",
            "bundle.js.map": "{}",
            "other.js.map": "{}",
            "main.py": "print()",
        })

        paths = _scanner().walk(tmp_path)

        assert _rel(paths, tmp_path) == [".gitignore", ".memo8ignore", "bundle.js.map", "main.py"]

    def test_default_ignored_map_file_is_scanned_when_reincluded(self, tmp_path):
        write_tree(tmp_path, {".memo8ignore": "!*.map\n", "dist.js.map": "{}"})

        paths = _scanner().walk(tmp_path)

        assert "dist.js.map" in _rel(paths, tmp_path)

    def test_ignored_directory_is_never_listed(self, tmp_path, monkeypatch):
        write_tree(tmp_path, {
            "index.js": "module.exports = 1;",
            "node_modules/locked/deep.js": "x",
        })
        trapped: list[str] = []
        real_scandir = os.scandir

        def trap(path):
            if "node_modules" in Path(path).parts:
                trapped.append(str(path))
                raise PermissionError(f"permission denied: {path}")
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", trap)

        paths = _scanner().walk(tmp_path)

        assert _rel(paths, tmp_path) == ["index.js"]
        assert trapped == []

    def test_unreadable_directory_is_skipped(self, tmp_path, monkeypatch):
        write_tree(tmp_path, {
            "a.txt": "a",
            "locked/hidden.txt": "h",
            "z/after.txt": "z",
        })
        real_scandir = os.scandir

        def deny_locked(path):
            if Path(path).name == "locked":
                raise PermissionError(f"permission denied: {path}")
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", deny_locked)

        paths = _scanner().walk(tmp_path)

        assert _rel(paths, tmp_path) == ["a.txt", "z/after.txt"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_are_not_followed(self, tmp_path):
        write_tree(tmp_path, {"real/file.txt": "content"})
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
        (tmp_path / "file-link.txt").symlink_to(tmp_path / "real" / "file.txt")

        paths = _scanner().walk(tmp_path)

        assert _rel(paths, tmp_path) == ["real/file.txt"]


class TestBuiltInDefaults:
    """A scanner built without arguments still applies the default ignore list."""

    def test_bare_scanner_prunes_dependencies_vcs_and_env(self, tmp_path):
        write_tree(tmp_path, {
            "a.py": "print(1)\n",
            "node_modules/x.js": "module.exports = {};",
            ".git/config": "[core]\n",
            ".env": "SECRET=1\n",
        })

        paths = FileScanner().walk(tmp_path)

        assert _rel(paths, tmp_path) == ["a.py"]

    def test_built_in_list_matches_packaged_defaults(self):
        assert DEFAULT_IGNORE_PATTERNS == IndexingConfig().default_ignore_patterns

    def test_empty_list_disables_defaults(self, tmp_path):
        write_tree(tmp_path, {"a.py": "print(1)\n", ".env": "SECRET=1\n"})

        paths = FileScanner(default_ignore_patterns=[]).walk(tmp_path)

        assert _rel(paths, tmp_path) == [".env", "a.py"]

    def test_service_plan_uses_defaults(self, tmp_path):
        write_tree(tmp_path, {
            "a.py": "print(1)\n",
            "node_modules/x.js": "module.exports = {};",
            ".env": "SECRET=1\n",
        })

        scan, _ = IndexingService(None).plan(tmp_path)

        assert [e.path for e in scan.entries] == ["a.py"]


class TestAdmit:
    """Binary/empty filtering and hashing."""

    def test_admit_builds_relative_forward_slash_entry(self, tmp_path):
        write_tree(tmp_path, {"src/pkg/mod.py": "x = 1\n"})

        entry = _scanner().admit(tmp_path / "src" / "pkg" / "mod.py", tmp_path)

        assert entry == FileEntry(
            path="src/pkg/mod.py",
            content_hash=hashlib.sha256(b"x = 1\n").hexdigest(),
            content="x = 1\n",
        )

    def test_null_byte_in_first_window_marks_binary(self, tmp_path):
        write_tree(tmp_path, {"notes.txt": b"header\x00rest"})

        assert _scanner().admit(tmp_path / "notes.txt", tmp_path) is None

    def test_null_byte_after_window_is_admitted(self, tmp_path):
        write_tree(tmp_path, {"long.txt": b"a" * 9000 + b"\x00"})

        entry = _scanner(binary_sniff_bytes=8192).admit(tmp_path / "long.txt", tmp_path)

        assert entry is not None
        assert entry.content.startswith("aaa")

    @pytest.mark.parametrize("content", [b"", b"   \n\t\n  "])
    def test_empty_and_whitespace_files_are_excluded(self, tmp_path, content):
        write_tree(tmp_path, {"blank.txt": content})

        assert _scanner().admit(tmp_path / "blank.txt", tmp_path) is None

    def test_invalid_utf8_is_decoded_leniently(self, tmp_path):
        write_tree(tmp_path, {"legacy.txt": b"caf\xe9 au lait"})

        entry = _scanner().admit(tmp_path / "legacy.txt", tmp_path)

        assert entry is not None
        assert entry.content == "caf� au lait"
        assert entry.content_hash == hashlib.sha256(entry.content.encode("utf-8")).hexdigest()

    def test_missing_file_is_excluded(self, tmp_path):
        assert _scanner().admit(tmp_path / "vanished.txt", tmp_path) is None


class TestScan:
    """Walk and admission together."""

    def test_end_to_end_scenario(self, tmp_path):
        write_tree(tmp_path, {
            "a.txt": "0123456789",
            "b.bin": b"\x89PNG\x00\x00data",
            "empty.txt": b"",
            "node_modules/x.js": "module.exports = {};",
        })

        result = _scanner().scan(tmp_path)

        assert [e.path for e in result.entries] == ["a.txt"]
        assert result.files_discovered == 1
        assert result.files_skipped == 2
        assert result.files_scanned == 3

    def test_rescanning_unchanged_tree_is_identical(self, tmp_path):
        write_tree(tmp_path, {
            "README.md": "# project\n",
            "src/app.py": "print('hi')\n",
            "src/util/helpers.py": "def f():\n    return 1\n",
        })
        scanner = _scanner()

        first = scanner.scan(tmp_path)
        second = scanner.scan(tmp_path)

        assert first.entries == second.entries
        assert [e.path for e in first.entries] == ["README.md", "src/app.py", "src/util/helpers.py"]

    def test_scan_of_empty_directory(self, tmp_path):
        result = _scanner().scan(tmp_path)

        assert result.entries == []
        assert result.files_scanned == 0
        assert result.files_skipped == 0
