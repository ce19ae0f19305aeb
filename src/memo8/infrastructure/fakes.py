"""
Fake implementations for testing.

Provides an in-memory indexing endpoint for use in unit and integration
tests without a running memo8 server.
"""

from __future__ import annotations

from collections.abc import Callable

from memo8.infrastructure.api import (
    ApiError,
    IndexingApiInterface,
    PayloadTooLargeError,
)


class InMemoryIndexingApi(IndexingApiInterface):
    """
    In-memory stand-in for the codebase index endpoint.

    Keeps indexed files keyed by (project_id, file_path), so re-uploading an
    unchanged file is a no-op just as it is on the server.
    """

    def __init__(
        self,
        max_files_per_request: int | None = None,
        max_bytes_per_request: int | None = None,
        fail_on_call: int | None = None,
        failure: Callable[[], Exception] | None = None,
    ):
        """
        Initialize the fake endpoint.

        Args:
            max_files_per_request: Reject larger requests with 413
            max_bytes_per_request: Reject requests whose summed content is larger with 413
            fail_on_call: 1-based call number that raises `failure`
            failure: Factory for the injected error (default: 500 ApiError)
        """
        self._max_files = max_files_per_request
        self._max_bytes = max_bytes_per_request
        self._fail_on_call = fail_on_call
        self._failure = failure or (lambda: ApiError("Internal Server Error", 500))
        self.calls: list[list[dict[str, str]]] = []
        self.accepted: list[list[dict[str, str]]] = []
        self.rejected: list[list[dict[str, str]]] = []
        self.index: dict[tuple[int, str], str] = {}
        self.closed = False

    async def index_files(self, project_id: int, files: list[dict[str, str]]) -> None:
        self.calls.append(list(files))

        if self._fail_on_call is not None and len(self.calls) == self._fail_on_call:
            raise self._failure()

        too_many = self._max_files is not None and len(files) > self._max_files
        too_big = self._max_bytes is not None and (
            sum(len(f["content"].encode("utf-8")) for f in files) > self._max_bytes
        )
        if too_many or too_big:
            self.rejected.append(list(files))
            raise PayloadTooLargeError("Payload too large", 413)

        self.accepted.append(list(files))
        for f in files:
            self.index[(project_id, f["file_path"])] = f["file_hash"]

    @property
    def accepted_paths(self) -> list[str]:
        """File paths from accepted requests, in submission order."""
        return [f["file_path"] for batch in self.accepted for f in batch]

    async def close(self) -> None:
        self.closed = True
