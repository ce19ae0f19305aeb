"""
Services container for memo8.

Builds the configuration, API client and file scanner once at process start
and hands them to the entry points, so no component looks up tokens, URLs or
limits on its own.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from memo8.core.config import Memo8Config, load_config
from memo8.core.file_scanner import FileScanner
from memo8.infrastructure import IndexingApiInterface, create_api_client


@dataclass
class ServicesContainer:
    """
    Container holding the shared service instances.

    Attributes:
        config: Application configuration
        api_client: Client for the memo8 API
        file_scanner: Scanner for the working tree
    """

    config: Memo8Config
    api_client: IndexingApiInterface
    file_scanner: FileScanner


def create_file_scanner(config: Memo8Config) -> FileScanner:
    """Create a FileScanner from the indexing section of the config."""
    return FileScanner(
        default_ignore_patterns=config.indexing.default_ignore_patterns,
        ignore_files=config.indexing.ignore_files,
        max_file_size=config.indexing.max_file_size,
        binary_sniff_bytes=config.indexing.binary_sniff_bytes,
    )


def create_services(
    config: Optional[Memo8Config] = None,
    config_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
) -> ServicesContainer:
    """
    Create and wire all services.

    Args:
        config: Pre-built configuration; loaded from disk and env when None.
        config_path: Optional YAML/JSON config file used when loading.
        cwd: Directory to start the .memo8.json search from.

    Returns:
        ServicesContainer with all initialized services.
    """
    if config is None:
        config = load_config(config_path, cwd=cwd)

    api_client = create_api_client(
        base_url=config.api.url,
        token=config.api.token,
        team_id=config.api.team_id,
        timeout=config.api.timeout,
    )

    return ServicesContainer(
        config=config,
        api_client=api_client,
        file_scanner=create_file_scanner(config),
    )
