"""
Indexing Service data models.

Contains the result dataclass for an indexing run and the service error.
"""

from dataclasses import dataclass


@dataclass
class IndexingResult:
    """Counters from one indexing run; nothing here is persisted."""

    files_scanned: int = 0
    files_discovered: int = 0
    files_skipped: int = 0
    files_indexed: int = 0
    total_batches: int = 0
    requests_sent: int = 0
    splits: int = 0
    duration_seconds: float = 0.0


class IndexingError(Exception):
    """Raised when an indexing run cannot start."""

    pass

