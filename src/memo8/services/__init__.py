"""
Service Layer - IndexingService and ServicesContainer.
"""

from memo8.services.container import (
    ServicesContainer,
    create_file_scanner,
    create_services,
)
from memo8.services.indexing_models import IndexingError, IndexingResult
from memo8.services.indexing_service import IndexingService

__all__ = [
    # Container and factory
    "ServicesContainer",
    "create_services",
    "create_file_scanner",
    # Services
    "IndexingService",
    "IndexingResult",
    "IndexingError",
]
