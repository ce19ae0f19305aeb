"""
Data models for the file scanner module.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileEntry:
    """
    One file prepared for upload to the indexing endpoint.

    Attributes:
        path: Path relative to the scan root, forward-slash separated
        content_hash: SHA-256 hex digest of the UTF-8 encoded content
        content: Full text body
    """

    path: str
    content_hash: str
    content: str

    @property
    def content_bytes(self) -> int:
        """Length of the content in UTF-8 bytes."""
        return len(self.content.encode("utf-8"))

    def to_payload(self) -> dict[str, str]:
        """Wire representation expected by the codebase index endpoint."""
        return {
            "file_path": self.path,
            "file_hash": self.content_hash,
            "content": self.content,
        }


@dataclass
class ScanResult:
    """
    Outcome of walking and admitting files under a root.

    Attributes:
        entries: Admitted files in walk order
        files_scanned: Files returned by the walk (after ignore rules and size limit)
        files_skipped: Walked files rejected as binary, empty or unreadable
    """

    entries: list[FileEntry] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0

    @property
    def files_discovered(self) -> int:
        """Number of admitted files."""
        return len(self.entries)
