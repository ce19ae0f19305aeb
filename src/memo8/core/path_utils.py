"""
Scan-root checks for memo8.

`codebase index` refuses to upload anything outside an ordinary project
directory: the path must exist, be a directory, and not be the filesystem
root or an operating-system directory.
"""

import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional


@dataclass
class PathValidationResult:
    """Outcome of checking a scan root.

    Attributes:
        valid: True if the directory can be indexed.
        error_message: Reason for rejection, None when valid.
    """

    valid: bool
    error_message: Optional[str] = None


PROTECTED_POSIX_ROOTS = tuple(
    PurePosixPath(p)
    for p in ("/bin", "/boot", "/dev", "/etc", "/lib", "/lib64", "/proc", "/sbin", "/sys", "/usr")
)

# Compared case-insensitively against every component below the drive
PROTECTED_WINDOWS_NAMES = frozenset({
    "windows",
    "program files",
    "program files (x86)",
    "programdata",
    "system32",
    "syswow64",
})


def is_system_directory(path: Path) -> bool:
    """True for the filesystem root and for anything inside an OS directory."""
    try:
        resolved = Path(path).resolve()
    except (OSError, ValueError):
        return False

    if resolved.parent == resolved:
        return True

    if sys.platform == "win32":
        return any(part.lower() in PROTECTED_WINDOWS_NAMES for part in resolved.parts[1:])

    posix = PurePosixPath(resolved.as_posix())
    return any(posix == root or root in posix.parents for root in PROTECTED_POSIX_ROOTS)


def validate_indexable_path(path: str | Path) -> PathValidationResult:
    """Check that `path` is an existing, non-system directory."""
    candidate = Path(path)
    try:
        if not candidate.exists():
            problem = f"Path '{path}' does not exist"
        elif not candidate.is_dir():
            problem = f"Path '{path}' is not a directory"
        elif is_system_directory(candidate):
            problem = "Indexing system directories is forbidden"
        else:
            problem = None
    except OSError as e:
        problem = f"Invalid path '{path}': {e}"

    return PathValidationResult(valid=problem is None, error_message=problem)
