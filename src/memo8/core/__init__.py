"""
Core Layer - Configuration, ignore rules, file scanning and batching.
"""

from memo8.core.batching import Batch, build_batches, estimate_entry_size
from memo8.core.config import (
    ApiConfig,
    IndexingConfig,
    LoggingConfig,
    Memo8Config,
    ProjectConfig,
    load_config,
)
from memo8.core.file_scanner import (
    FileEntry,
    FileScanner,
    FileScannerInterface,
    ScanResult,
)
from memo8.core.ignore_rules import IgnoreRule, IgnoreRuleSet

__all__ = [
    # Config
    "Memo8Config",
    "ApiConfig",
    "ProjectConfig",
    "IndexingConfig",
    "LoggingConfig",
    "load_config",
    # Ignore rules
    "IgnoreRule",
    "IgnoreRuleSet",
    # FileScanner
    "FileEntry",
    "ScanResult",
    "FileScannerInterface",
    "FileScanner",
    # Batching
    "Batch",
    "build_batches",
    "estimate_entry_size",
]
