"""
Abstract interfaces for file scanning operations.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import FileEntry, ScanResult


class FileScannerInterface(ABC):
    """
    Abstract interface for file scanning operations.

    Implementations walk a directory under ignore rules and turn the
    surviving files into FileEntry objects ready for upload.
    """

    @abstractmethod
    def walk(self, root_path: Path) -> list[Path]:
        """
        List candidate files under root_path.

        Args:
            root_path: Root directory to scan

        Returns:
            Absolute file paths, depth-first, in a stable order

        Notes:
            - Ignored directories are pruned, never listed
            - Files over the size limit are left out
            - Unreadable directories are skipped without raising
        """
        pass

    @abstractmethod
    def admit(self, file_path: Path, root_path: Path) -> FileEntry | None:
        """
        Read, filter and hash a single candidate file.

        Returns:
            FileEntry, or None for binary, empty or unreadable files
        """
        pass

    @abstractmethod
    def scan(self, root_path: Path) -> ScanResult:
        """Walk root_path and admit every candidate file."""
        pass
