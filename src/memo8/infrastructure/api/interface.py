"""Abstract interface for the codebase indexing endpoint."""

from abc import ABC, abstractmethod


class IndexingApiInterface(ABC):
    """Abstract interface for clients that accept codebase batches."""

    @abstractmethod
    async def index_files(self, project_id: int, files: list[dict[str, str]]) -> None:
        """
        Upload one batch of files to a project's codebase index.

        Args:
            project_id: Target project
            files: File payloads ({"file_path", "file_hash", "content"})

        Raises:
            PayloadTooLargeError: If the server rejects the body as too large
            ApiError: For any other failure
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
