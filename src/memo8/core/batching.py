"""
Byte-bounded batching of FileEntry objects for upload.

A repository is uploaded in several requests so that no single request
exceeds the server's payload limit. Batches are filled greedily in input
order; an entry that is larger than the ceiling on its own still gets sent,
alone in its batch.
"""

import logging
from dataclasses import dataclass, field

from memo8.core.file_scanner import FileEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_BYTES = 4 * 1024 * 1024
DEFAULT_ENTRY_OVERHEAD = 100


def estimate_entry_size(entry: FileEntry, overhead: int = DEFAULT_ENTRY_OVERHEAD) -> int:
    """
    Estimate the serialized size of an entry in a request body.

    Content bytes plus path and hash lengths plus a fixed allowance for
    JSON framing.
    """
    return entry.content_bytes + len(entry.path) + len(entry.content_hash) + overhead


@dataclass
class Batch:
    """An ordered, non-empty group of entries submitted in one request."""

    entries: list[FileEntry] = field(default_factory=list)
    entry_sizes: list[int] = field(default_factory=list)
    size_bytes: int = 0

    def __post_init__(self) -> None:
        if self.entry_sizes and not self.size_bytes:
            self.size_bytes = sum(self.entry_sizes)

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, entry: FileEntry, entry_size: int) -> None:
        self.entries.append(entry)
        self.entry_sizes.append(entry_size)
        self.size_bytes += entry_size

    def split(self) -> tuple["Batch", "Batch"]:
        """
        Split into two halves by count; the first half takes the odd entry.

        Raises:
            ValueError: If the batch has fewer than two entries
        """
        if len(self.entries) < 2:
            raise ValueError("Cannot split a batch with fewer than two entries")

        mid = (len(self.entries) + 1) // 2
        first = Batch(self.entries[:mid], self.entry_sizes[:mid])
        second = Batch(self.entries[mid:], self.entry_sizes[mid:])
        return first, second

    def to_payload(self) -> dict:
        """Request body for the codebase index endpoint."""
        return {"files": [entry.to_payload() for entry in self.entries]}


def build_batches(
    entries: list[FileEntry],
    max_batch_bytes: int = DEFAULT_MAX_BATCH_BYTES,
    entry_overhead: int = DEFAULT_ENTRY_OVERHEAD,
) -> list[Batch]:
    """
    Partition entries into batches whose estimated size stays within max_batch_bytes.

    Args:
        entries: Entries in upload order
        max_batch_bytes: Soft ceiling for a batch's estimated size
        entry_overhead: Fixed per-entry allowance added to each estimate

    Returns:
        Batches in input order; empty when entries is empty

    Raises:
        ValueError: If max_batch_bytes is not positive
    """
    if max_batch_bytes < 1:
        raise ValueError("max_batch_bytes must be at least 1")

    batches: list[Batch] = []
    current = Batch()

    for entry in entries:
        entry_size = estimate_entry_size(entry, entry_overhead)

        if current.entries and current.size_bytes + entry_size > max_batch_bytes:
            batches.append(current)
            current = Batch()

        if entry_size > max_batch_bytes:
            logger.debug(
                f"Entry {entry.path} ({entry_size} bytes) exceeds the batch ceiling; "
                "sending it alone"
            )

        current.add(entry, entry_size)

    if current.entries:
        batches.append(current)

    logger.debug(f"Built {len(batches)} batches from {len(entries)} entries")
    return batches
