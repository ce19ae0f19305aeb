"""
Infrastructure Layer - memo8 API client and test fakes.
"""

from memo8.infrastructure.api import (
    ApiError,
    AuthenticationError,
    IndexingApiInterface,
    Memo8ApiClient,
    PayloadTooLargeError,
    ValidationError,
    create_api_client,
)
from memo8.infrastructure.fakes import InMemoryIndexingApi

__all__ = [
    # API client
    "IndexingApiInterface",
    "Memo8ApiClient",
    "create_api_client",
    "ApiError",
    "AuthenticationError",
    "ValidationError",
    "PayloadTooLargeError",
    # Fakes for testing
    "InMemoryIndexingApi",
]
