"""
FileScanner module for memo8.

Walks a directory under layered ignore rules and prepares text files
for upload to the codebase index.
"""

from .interfaces import FileScannerInterface
from .models import FileEntry, ScanResult
from .scanner import FileScanner

__all__ = [
    "FileScanner",
    "FileScannerInterface",
    "FileEntry",
    "ScanResult",
]
