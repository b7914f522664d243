"""Configuration module for projets-indexer.

Settings come from built-in defaults, an optional YAML file and environment
variables, in increasing order of precedence. CLI flags override all three
and are applied by the command handlers.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from projets_indexer.errors import ConfigurationError

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "projets-indexer" / "config.yaml"
DEFAULT_PROJECTS_DIR = "~/projects"
DEFAULT_INDEX_FILE = "projects_index.json"
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "gemma3:1b"
DEFAULT_OLLAMA_TIMEOUT = 30.0
DEFAULT_GIT_TIMEOUT = 10.0
DEFAULT_DEPTH = 3

# System directories and build artifacts that never hold projects
DEFAULT_EXCLUDE = (
    ".git",
    "node_modules",
    "__pycache__",
    "target",
    ".idea",
    ".vscode",
    ".env",
    ".mypy_cache",
    "venv",
    ".gradio",
    "__MACOSX",
    "build",
    "dist",
    ".next",
    ".cache",
    ".pytest_cache",
    ".tox",
    ".eggs",
    "coverage",
    "htmlcov",
    ".coverage",
    ".DS_Store",
)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def default_workers() -> int:
    """Number of worker threads used when none is configured."""
    return os.cpu_count() or 1


def parse_exclude(value: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Turn a comma-separated string (or a list) into a tuple of segment names."""
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    return tuple(item.strip() for item in items if item.strip())


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES or text == "":
        return False
    raise ConfigurationError(f"Invalid {name} value '{value}': expected a boolean")


def _parse_positive_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {name} value '{value}': {e}") from e
    if number <= 0:
        raise ConfigurationError(f"Invalid {name} value '{value}': must be > 0")
    return number


def _parse_workers(name: str, value: Any) -> int:
    try:
        workers = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {name} value '{value}': {e}") from e
    if workers < 1:
        raise ConfigurationError(f"Invalid {name} value '{value}': must be >= 1")
    return workers


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the YAML configuration file.

    A missing file yields an empty mapping. Unreadable files, invalid YAML and
    documents that are not a mapping raise ConfigurationError.
    """
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


@dataclass
class Config:
    """Application configuration."""

    projects_dir: Path
    index_file: Path
    ollama: bool
    ollama_url: str
    ollama_model: str
    ollama_timeout: float
    git_timeout: float
    workers: int
    exclude: tuple[str, ...]

    @classmethod
    def from_env(cls, config_file: Path | None = None) -> "Config":
        """Load configuration from the YAML file and environment variables.

        Args:
            config_file: YAML file to read. Defaults to PROJETS_CONFIG, then
                ~/.config/projets-indexer/config.yaml.
        """
        if config_file is None:
            config_file = Path(
                os.getenv("PROJETS_CONFIG", str(DEFAULT_CONFIG_FILE))
            ).expanduser()
        file_values = load_config_file(config_file)

        def setting(env_name: str, key: str, default: Any) -> tuple[str, Any]:
            # Environment wins over the file, the file over the default
            value = os.getenv(env_name)
            if value is not None:
                return env_name, value
            if key in file_values and file_values[key] is not None:
                return f"{key} (in {config_file})", file_values[key]
            return env_name, default

        _, projects_dir = setting("PROJETS_DIR", "projects_dir", DEFAULT_PROJECTS_DIR)
        _, index_file = setting("PROJETS_INDEX", "index_file", DEFAULT_INDEX_FILE)
        name, ollama = setting("PROJETS_OLLAMA", "ollama", False)
        ollama = _parse_bool(name, ollama)
        _, ollama_url = setting("PROJETS_OLLAMA_URL", "ollama_url", DEFAULT_OLLAMA_URL)
        _, ollama_model = setting(
            "PROJETS_OLLAMA_MODEL", "ollama_model", DEFAULT_OLLAMA_MODEL
        )
        name, ollama_timeout = setting(
            "PROJETS_OLLAMA_TIMEOUT", "ollama_timeout", DEFAULT_OLLAMA_TIMEOUT
        )
        ollama_timeout = _parse_positive_float(name, ollama_timeout)
        name, git_timeout = setting("PROJETS_GIT_TIMEOUT", "git_timeout", DEFAULT_GIT_TIMEOUT)
        git_timeout = _parse_positive_float(name, git_timeout)
        name, workers = setting("PROJETS_WORKERS", "workers", default_workers())
        workers = _parse_workers(name, workers)
        _, exclude = setting("PROJETS_EXCLUDE", "exclude", DEFAULT_EXCLUDE)

        return cls(
            projects_dir=Path(str(projects_dir)).expanduser(),
            index_file=Path(str(index_file)).expanduser(),
            ollama=ollama,
            ollama_url=str(ollama_url).rstrip("/"),
            ollama_model=str(ollama_model),
            ollama_timeout=ollama_timeout,
            git_timeout=git_timeout,
            workers=workers,
            exclude=parse_exclude(exclude),
        )


@dataclass
class IndexerConfig:
    """Options for a single indexing run."""

    projects_dir: Path
    index_file: Path
    enable_ollama: bool = False
    min_depth: int = DEFAULT_DEPTH
    max_depth: int = DEFAULT_DEPTH
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    skip_hidden: bool = False
    workers: int = field(default_factory=default_workers)

    def validate(self) -> None:
        """Check the options before any traversal begins.

        Raises:
            ConfigurationError: If the root is missing or the depths or
                worker count are out of range.
        """
        if not self.projects_dir.exists():
            raise ConfigurationError(
                f"Projects directory does not exist: {self.projects_dir}"
            )
        if not self.projects_dir.is_dir():
            raise ConfigurationError(
                f"Projects directory is not a directory: {self.projects_dir}"
            )
        if self.min_depth < 0 or self.max_depth < 0:
            raise ConfigurationError(
                f"Depths must be >= 0, got min={self.min_depth} max={self.max_depth}"
            )
        if self.min_depth > self.max_depth:
            raise ConfigurationError(
                f"Minimum depth ({self.min_depth}) exceeds maximum depth ({self.max_depth})"
            )
        if self.workers < 1:
            raise ConfigurationError(f"Worker count must be >= 1, got {self.workers}")
