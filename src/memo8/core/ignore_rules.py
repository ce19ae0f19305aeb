"""
Layered ignore rules for codebase indexing.

Rules are gathered in precedence order:
- Built-in default patterns (lowest precedence)
- The root .gitignore
- The root .memo8ignore (highest precedence)

Matching follows gitignore semantics via pathspec: the last matching pattern
wins, so a negation (!) in a later source re-includes a path excluded by an
earlier one, and a pattern with a trailing / only matches directories.
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath

import pathspec

logger = logging.getLogger(__name__)

DEFAULTS_SOURCE = "<defaults>"


@dataclass(frozen=True)
class IgnoreRule:
    """
    A single ignore pattern with its origin.

    Attributes:
        raw: Pattern as written (e.g., "!*.map")
        source: Ignore file the pattern came from, or "<defaults>"
    """

    raw: str
    source: str

    @property
    def negation(self) -> bool:
        return self.raw.startswith("!")

    @property
    def directory_only(self) -> bool:
        return self.raw.rstrip().endswith("/")


def _clean_lines(lines: list[str], source: str = DEFAULTS_SOURCE) -> list[str]:
    """Drop blank lines, comments and malformed patterns; keep the rest in order."""
    cleaned = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            pathspec.GitIgnoreSpec.from_lines([line])
        except ValueError as e:
            logger.warning(f"Malformed pattern '{line}' in {source}: {e}")
            continue
        cleaned.append(line)
    return cleaned


class IgnoreRuleSet:
    """
    Ordered union of ignore patterns with a compiled matcher.

    Built once per scan; treat as read-only afterwards.
    """

    def __init__(self, rules: list[IgnoreRule] | None = None):
        self._rules: list[IgnoreRule] = list(rules or [])
        self._spec = self._compile(self._rules)

    @staticmethod
    def _compile(rules: list[IgnoreRule]) -> pathspec.GitIgnoreSpec | None:
        if not rules:
            return None
        return pathspec.GitIgnoreSpec.from_lines([r.raw for r in rules])

    @classmethod
    def for_root(
        cls,
        root_path: Path,
        default_patterns: list[str],
        ignore_files: list[str],
    ) -> "IgnoreRuleSet":
        """
        Build the rule set for a scan root.

        Args:
            root_path: Directory being scanned
            default_patterns: Built-in patterns, applied first
            ignore_files: Names of ignore files at the root, in precedence order

        Returns:
            IgnoreRuleSet with defaults followed by each ignore file's patterns
        """
        root_path = Path(root_path)
        rules = [IgnoreRule(p, DEFAULTS_SOURCE) for p in _clean_lines(default_patterns)]

        for name in ignore_files:
            patterns = load_ignore_file(root_path / name)
            rules.extend(IgnoreRule(p, name) for p in patterns)
            if patterns:
                logger.debug(f"Loaded {len(patterns)} patterns from {name}")

        rule_set = cls(rules)
        logger.debug(f"Ignore rules for {root_path}: {rule_set.rule_count} patterns")
        return rule_set

    @property
    def rule_count(self) -> int:
        """Return the number of loaded rules."""
        return len(self._rules)

    @property
    def rules(self) -> list[IgnoreRule]:
        """Return a copy of the loaded rules."""
        return list(self._rules)

    def is_ignored(self, relative_path: str | PurePath, is_dir: bool = False) -> bool:
        """
        Check whether a root-relative path is excluded.

        Directories are tested both bare and with a trailing slash, since
        directory-only patterns ("build/") match only the latter.

        Args:
            relative_path: Path relative to the scan root
            is_dir: True if the path is a directory

        Returns:
            True if the path should be skipped
        """
        if self._spec is None:
            return False

        rel = str(relative_path).replace("\\", "/").strip("/")
        if not rel or rel == ".":
            return False

        if self._spec.match_file(rel):
            return True
        if is_dir and self._spec.match_file(rel + "/"):
            return True
        return False


def load_ignore_file(path: Path) -> list[str]:
    """
    Read patterns from an ignore file.

    Returns:
        Patterns in file order; [] if the file is missing or unreadable.
        Read errors are logged, never raised.
    """
    if not path.is_file():
        logger.debug(f"Ignore file not found: {path}")
        return []

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Invalid UTF-8 encoding in {path}: {e}")
        return []
    except PermissionError as e:
        logger.warning(f"Permission denied reading {path}: {e}")
        return []
    except OSError as e:
        logger.warning(f"Error reading {path}: {e}")
        return []

    return _clean_lines(content.splitlines(), source=str(path))
