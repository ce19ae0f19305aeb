"""
FileScanner implementation: directory walk and file admission.
"""

import hashlib
import logging
import os
from pathlib import Path

from memo8.core.ignore_rules import IgnoreRuleSet

from .interfaces import FileScannerInterface
from .models import FileEntry, ScanResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 512 * 1024
DEFAULT_BINARY_SNIFF_BYTES = 8192
DEFAULT_IGNORE_FILES = [".gitignore", ".memo8ignore"]

# Applied before the root ignore files, which may re-include with "!"
DEFAULT_IGNORE_PATTERNS = [
    "node_modules",
    ".git",
    "vendor",
    "dist",
    "build",
    ".next",
    "storage",
    ".DS_Store",
    "*.lock",
    "package-lock.json",
    "composer.lock",
    "*.min.js",
    "*.min.css",
    "*.map",
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.svg",
    "*.ico",
    "*.woff",
    "*.woff2",
    "*.ttf",
    "*.eot",
    "*.pdf",
    "*.zip",
    "*.tar.gz",
    "*.sqlite",
    "*.db",
    "*.pyc",
    ".env",
    ".env.*",
    ".memo8.json",
]


def _compute_sha256(content: str) -> str:
    """Compute SHA-256 hash of string content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _is_binary(data: bytes, sniff_bytes: int) -> bool:
    """Null byte in the leading window means binary."""
    return b"\x00" in data[:sniff_bytes]


class FileScanner(FileScannerInterface):
    """
    Concrete implementation of FileScannerInterface.

    Provides:
    - Depth-first walk driven by an explicit stack
    - Layered ignore rules (defaults, .gitignore, .memo8ignore) with pruning
    - Size limit applied at walk time
    - Binary/empty filtering and SHA-256 content hashing
    - Best-effort handling of unreadable directories and files
    """

    def __init__(
        self,
        default_ignore_patterns: list[str] | None = None,
        ignore_files: list[str] | None = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        binary_sniff_bytes: int = DEFAULT_BINARY_SNIFF_BYTES,
    ):
        """
        Initialize the FileScanner.

        Args:
            default_ignore_patterns: Built-in gitignore-style patterns, lowest
                precedence. None uses DEFAULT_IGNORE_PATTERNS; [] disables them.
            ignore_files: Ignore file names read from the scan root, in
                precedence order. Defaults to .gitignore then .memo8ignore.
            max_file_size: Files larger than this many bytes are not walked.
            binary_sniff_bytes: Leading bytes inspected for a null byte.
        """
        self._default_ignore_patterns = list(
            default_ignore_patterns
            if default_ignore_patterns is not None
            else DEFAULT_IGNORE_PATTERNS
        )
        self._ignore_files = (
            list(ignore_files) if ignore_files is not None else list(DEFAULT_IGNORE_FILES)
        )
        self._max_file_size = max_file_size
        self._binary_sniff_bytes = binary_sniff_bytes

    def build_ignore_rules(self, root_path: Path) -> IgnoreRuleSet:
        """Build the ignore rule set for a scan root."""
        return IgnoreRuleSet.for_root(
            root_path, self._default_ignore_patterns, self._ignore_files
        )

    def walk(self, root_path: Path) -> list[Path]:
        root_path = Path(root_path).resolve()
        rules = self.build_ignore_rules(root_path)
        return self._walk(root_path, rules)

    def _walk(self, root_path: Path, rules: IgnoreRuleSet) -> list[Path]:
        files: list[Path] = []
        stack: list[Path] = [root_path]

        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                logger.debug(f"Skipping unreadable directory: {current} - {e}")
                continue

            subdirs: list[Path] = []
            for entry in entries:
                entry_path = Path(entry.path)
                rel_path = entry_path.relative_to(root_path).as_posix()
                try:
                    if entry.is_symlink():
                        logger.debug(f"Skipping symlink: {rel_path}")
                        continue
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = entry.is_file(follow_symlinks=False)
                except OSError as e:
                    logger.debug(f"Skipping unreadable entry: {rel_path} - {e}")
                    continue

                if rules.is_ignored(rel_path, is_dir=is_dir):
                    logger.debug(f"Ignoring: {rel_path}")
                    continue

                if is_dir:
                    subdirs.append(entry_path)
                elif is_file:
                    try:
                        size = entry.stat(follow_symlinks=False).st_size
                    except OSError as e:
                        logger.debug(f"Skipping unreadable file: {rel_path} - {e}")
                        continue
                    if size > self._max_file_size:
                        logger.debug(f"Skipping large file ({size} bytes): {rel_path}")
                        continue
                    files.append(entry_path)

            # Reversed so the first subdirectory is popped, and walked, first
            stack.extend(reversed(subdirs))

        return files

    def admit(self, file_path: Path, root_path: Path) -> FileEntry | None:
        file_path = Path(file_path).resolve()
        root_path = Path(root_path).resolve()

        try:
            data = file_path.read_bytes()
        except OSError as e:
            logger.debug(f"Skipping unreadable file: {file_path} - {e}")
            return None

        if _is_binary(data, self._binary_sniff_bytes):
            logger.debug(f"Skipping binary file: {file_path}")
            return None

        content = data.decode("utf-8", errors="replace")
        if not content.strip():
            logger.debug(f"Skipping empty file: {file_path}")
            return None

        return FileEntry(
            path=file_path.relative_to(root_path).as_posix(),
            content_hash=_compute_sha256(content),
            content=content,
        )

    def scan(self, root_path: Path) -> ScanResult:
        root_path = Path(root_path).resolve()
        paths = self.walk(root_path)

        result = ScanResult(files_scanned=len(paths))
        for path in paths:
            entry = self.admit(path, root_path)
            if entry is None:
                result.files_skipped += 1
            else:
                result.entries.append(entry)

        logger.info(
            f"Scanned {result.files_scanned} files under {root_path}: "
            f"{result.files_discovered} admitted, {result.files_skipped} skipped"
        )
        return result
