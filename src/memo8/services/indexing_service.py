"""
Indexing Service for memo8.

Coordinates the indexing workflow: file scanning, batch construction and
sequential upload to the project's codebase index.

Batches are submitted strictly one after another. When the server rejects a
batch as too large (HTTP 413) the batch is halved and each half resubmitted,
recursively, until it is accepted or a single file is still refused. Any
other failure aborts the run; batches already accepted stay indexed, and a
rerun is safe because the server keys files on path and content hash.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from memo8.core.batching import (
    DEFAULT_ENTRY_OVERHEAD,
    DEFAULT_MAX_BATCH_BYTES,
    Batch,
    build_batches,
)
from memo8.core.file_scanner import FileScanner, FileScannerInterface, ScanResult
from memo8.infrastructure.api import IndexingApiInterface, PayloadTooLargeError
from memo8.services.indexing_models import IndexingError, IndexingResult

logger = logging.getLogger(__name__)


class IndexingService:
    """
    Service for uploading a working tree to the memo8 codebase index.
    """

    def __init__(
        self,
        api_client: Optional[IndexingApiInterface],
        file_scanner: Optional[FileScannerInterface] = None,
        max_batch_bytes: int = DEFAULT_MAX_BATCH_BYTES,
        entry_overhead: int = DEFAULT_ENTRY_OVERHEAD,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ):
        """
        Initialize the indexing service.

        Args:
            api_client: Client for the indexing endpoint (may be None for dry runs)
            file_scanner: Scanner for finding files (default: FileScanner)
            max_batch_bytes: Soft ceiling on the estimated size of one request
            entry_overhead: Fixed per-file allowance in the size estimate
            progress_callback: Optional callback(current, total, message)
        """
        self._api_client = api_client
        self._file_scanner = file_scanner or FileScanner()
        self._max_batch_bytes = max_batch_bytes
        self._entry_overhead = entry_overhead
        self._progress_callback = progress_callback

    def _report_progress(self, current: int, total: int, message: str) -> None:
        """Report progress if callback is set."""
        if self._progress_callback:
            self._progress_callback(current, total, message)
        logger.info(f"Progress: {current}/{total} - {message}")

    def plan(self, root_path: Path) -> tuple[ScanResult, list[Batch]]:
        """
        Scan a directory and group its files into upload batches.

        No network traffic; used directly for dry runs.

        Returns:
            Tuple of (scan result, batches in upload order)
        """
        scan = self._file_scanner.scan(root_path)
        batches = build_batches(
            scan.entries,
            max_batch_bytes=self._max_batch_bytes,
            entry_overhead=self._entry_overhead,
        )
        return scan, batches

    async def index_directory(self, root_path: Path, project_id: int) -> IndexingResult:
        """
        Index all admissible files under a directory.

        Args:
            root_path: Root directory to index
            project_id: Project whose codebase index receives the files

        Returns:
            IndexingResult with statistics

        Raises:
            IndexingError: If no API client is configured
            ApiError: On the first non-recoverable submission failure
        """
        if self._api_client is None:
            raise IndexingError("No API client configured for indexing")

        start_time = time.time()
        result = IndexingResult()

        self._report_progress(0, 0, "Scanning files...")
        scan, batches = self.plan(root_path)

        result.files_scanned = scan.files_scanned
        result.files_discovered = scan.files_discovered
        result.files_skipped = scan.files_skipped
        result.total_batches = len(batches)

        if not batches:
            logger.info(f"No indexable files found under {root_path}")
            result.duration_seconds = time.time() - start_time
            return result

        total = scan.files_discovered
        self._report_progress(
            0, total, f"Indexing files... (0/{total}) [batch 0/{len(batches)}]"
        )

        for i, batch in enumerate(batches, start=1):
            try:
                await self._submit(project_id, batch, result)
            except Exception:
                logger.error(
                    f"Indexing aborted at batch {i}/{len(batches)} "
                    f"after {result.files_indexed} files"
                )
                raise

            result.files_indexed += len(batch)
            self._report_progress(
                result.files_indexed,
                total,
                f"Indexing files... ({result.files_indexed}/{total}) "
                f"[batch {i}/{len(batches)}]",
            )

        result.duration_seconds = time.time() - start_time
        logger.info(
            f"Indexed {result.files_indexed} files in {result.total_batches} batches "
            f"({result.requests_sent} requests, {result.splits} splits)"
        )
        return result

    async def _submit(self, project_id: int, batch: Batch, result: IndexingResult) -> None:
        """
        Submit one batch, halving it on 413 until every part is accepted.

        Raises:
            PayloadTooLargeError: If a single file is rejected as too large
            ApiError: For any other failure
        """
        result.requests_sent += 1
        try:
            await self._api_client.index_files(
                project_id, [entry.to_payload() for entry in batch.entries]
            )
        except PayloadTooLargeError:
            if len(batch) < 2:
                logger.error(
                    f"Server rejected {batch.entries[0].path} as too large "
                    f"({batch.size_bytes} bytes estimated)"
                )
                raise

            first, second = batch.split()
            result.splits += 1
            logger.warning(
                f"Payload too large for {len(batch)} files; "
                f"retrying as {len(first)} + {len(second)}"
            )
            await self._submit(project_id, first, result)
            await self._submit(project_id, second, result)
