"""
Configuration module for memo8.

Builds a single Memo8Config from packaged defaults (defaults.yaml), the global
~/.memo8/config.json, the nearest project-local .memo8.json and MEMO8_*
environment variables, in that order of precedence. The resulting object is
passed explicitly to the services that need it.
"""

import copy
import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

GLOBAL_CONFIG_DIR_ENV = "MEMO8_CONFIG_DIR"
GLOBAL_CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = ".memo8.json"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section, {})
    # Lists are copied so instances never share the cached defaults
    return copy.deepcopy(section_defaults.get(key, fallback))


def _as_int(key: str, value: Any, current: Optional[int]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid value for {key}: {value!r}")
        return current


@dataclass
class ApiConfig:
    """Connection settings for the memo8 API."""

    url: str = field(default_factory=lambda: _get_default("api", "url", "https://api.memo8.ai/api"))
    token: str = field(default_factory=lambda: _get_default("api", "token", "") or "")
    team_id: Optional[int] = field(default_factory=lambda: _get_default("api", "team_id"))
    timeout: float = field(default_factory=lambda: _get_default("api", "timeout", 30.0))


@dataclass
class ProjectConfig:
    """Project binding for the current working directory."""

    project_id: Optional[int] = field(
        default_factory=lambda: _get_default("project", "project_id")
    )


@dataclass
class IndexingConfig:
    """Limits and ignore rules for codebase indexing."""

    max_file_size: int = field(
        default_factory=lambda: _get_default("indexing", "max_file_size", 512 * 1024)
    )
    max_batch_bytes: int = field(
        default_factory=lambda: _get_default("indexing", "max_batch_bytes", 4 * 1024 * 1024)
    )
    entry_overhead: int = field(
        default_factory=lambda: _get_default("indexing", "entry_overhead", 100)
    )
    binary_sniff_bytes: int = field(
        default_factory=lambda: _get_default("indexing", "binary_sniff_bytes", 8192)
    )
    ignore_files: list[str] = field(
        default_factory=lambda: _get_default(
            "indexing", "ignore_files", [".gitignore", ".memo8ignore"]
        )
    )
    default_ignore_patterns: list[str] = field(
        default_factory=lambda: _get_default(
            "indexing",
            "default_ignore_patterns",
            ["node_modules", ".git", "dist", "build", ".env", ".env.*", ".memo8.json"],
        )
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass
class Memo8Config:
    """Main configuration class for memo8."""

    api: ApiConfig = field(default_factory=ApiConfig)
    project: ProjectConfig = field(default_factory=ProjectConfig)
    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "Memo8Config":
        """
        Load configuration from a YAML or JSON file laid out like defaults.yaml.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            Memo8Config instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Memo8Config":
        """Create Memo8Config from a dictionary."""
        config = cls()

        if "api" in data:
            config.api = ApiConfig(**data["api"])
        if "project" in data:
            config.project = ProjectConfig(**data["project"])
        if "indexing" in data:
            config.indexing = IndexingConfig(**data["indexing"])
        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        return config

    def apply_global_config(self, data: dict) -> "Memo8Config":
        """
        Apply values from the global ~/.memo8/config.json.

        The file uses the CLI's camelCase keys: apiUrl, token, teamId.
        """
        if data.get("apiUrl"):
            self.api.url = str(data["apiUrl"])
        if data.get("token"):
            self.api.token = str(data["token"])
        if data.get("teamId"):
            self.api.team_id = _as_int("teamId", data["teamId"], self.api.team_id)
        return self

    def apply_local_config(self, data: dict) -> "Memo8Config":
        """Apply values from a project-local .memo8.json (projectId)."""
        if data.get("projectId"):
            self.project.project_id = _as_int(
                "projectId", data["projectId"], self.project.project_id
            )
        return self

    def apply_env_overrides(self) -> "Memo8Config":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern MEMO8_<SECTION>_<KEY>, plus
        the short names the CLI has always honoured:
            - MEMO8_API_URL
            - MEMO8_API_TOKEN
            - MEMO8_TEAM_ID
            - MEMO8_PROJECT_ID
            - MEMO8_INDEXING_MAX_BATCH_BYTES
            - MEMO8_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # API config
            "MEMO8_API_URL": ("api", "url", str),
            "MEMO8_API_TOKEN": ("api", "token", str),
            "MEMO8_TEAM_ID": ("api", "team_id", int),
            "MEMO8_API_TIMEOUT": ("api", "timeout", float),
            # Project config
            "MEMO8_PROJECT_ID": ("project", "project_id", int),
            # Indexing config
            "MEMO8_INDEXING_MAX_FILE_SIZE": ("indexing", "max_file_size", int),
            "MEMO8_INDEXING_MAX_BATCH_BYTES": ("indexing", "max_batch_bytes", int),
            "MEMO8_INDEXING_ENTRY_OVERHEAD": ("indexing", "entry_overhead", int),
            "MEMO8_INDEXING_BINARY_SNIFF_BYTES": ("indexing", "binary_sniff_bytes", int),
            # Logging config
            "MEMO8_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                section_obj = getattr(self, section)
                try:
                    setattr(section_obj, key, converter(value))
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_var}: {value!r}")

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        data = asdict(self)
        # Never echo the token back in dumps
        if data["api"]["token"]:
            data["api"]["token"] = "***"
        return data

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)


def get_global_config_dir() -> Path:
    """Return the directory holding the global config.json."""
    override = os.environ.get(GLOBAL_CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".memo8"


def _read_json_config(path: Path) -> dict:
    """Read a JSON config file, returning {} when missing or malformed."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: expected a JSON object")
        return {}
    return data


def find_local_config(start: Path | None = None) -> Path | None:
    """
    Find the nearest .memo8.json walking up from start (default: cwd).

    Returns:
        Path to the config file, or None if no ancestor has one
    """
    current = Path(start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / LOCAL_CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(
    config_path: Optional[Path | str] = None,
    cwd: Optional[Path] = None,
    apply_env: bool = True,
) -> Memo8Config:
    """
    Load configuration with the full precedence chain.

    Args:
        config_path: Optional YAML/JSON file laid out like defaults.yaml.
        cwd: Directory to start the .memo8.json search from (default: cwd).
        apply_env: Whether to apply environment variable overrides.

    Returns:
        Memo8Config instance
    """
    if config_path:
        config = Memo8Config.from_file(config_path)
    else:
        config = Memo8Config()

    config.apply_global_config(
        _read_json_config(get_global_config_dir() / GLOBAL_CONFIG_FILENAME)
    )

    local_path = find_local_config(cwd)
    if local_path is not None:
        logger.debug(f"Using project config {local_path}")
        config.apply_local_config(_read_json_config(local_path))

    if apply_env:
        config.apply_env_overrides()

    return config
