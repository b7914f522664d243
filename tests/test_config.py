"""Tests for config module."""

from pathlib import Path

import pytest

from projets_indexer.config import (
    DEFAULT_EXCLUDE,
    Config,
    IndexerConfig,
    load_config_file,
    parse_exclude,
)
from projets_indexer.errors import ConfigurationError

ENV_VARS = (
    "PROJETS_CONFIG",
    "PROJETS_DIR",
    "PROJETS_INDEX",
    "PROJETS_OLLAMA",
    "PROJETS_OLLAMA_URL",
    "PROJETS_OLLAMA_MODEL",
    "PROJETS_OLLAMA_TIMEOUT",
    "PROJETS_GIT_TIMEOUT",
    "PROJETS_WORKERS",
    "PROJETS_EXCLUDE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and config file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROJETS_CONFIG", str(tmp_path / "absent.yaml"))


def test_config_defaults():
    """Test config loads with defaults when no env vars set."""
    config = Config.from_env()
    assert config.projects_dir == Path.home() / "projects"
    assert config.index_file == Path("projects_index.json")
    assert config.ollama is False
    assert config.ollama_url == "http://localhost:11434"
    assert config.ollama_model == "gemma3:1b"
    assert config.ollama_timeout == 30.0
    assert config.git_timeout == 10.0
    assert config.workers >= 1
    assert config.exclude == DEFAULT_EXCLUDE


def test_config_from_env(monkeypatch):
    """Test config loads from environment variables."""
    monkeypatch.setenv("PROJETS_DIR", "/custom/projects")
    monkeypatch.setenv("PROJETS_INDEX", "/custom/index.json")
    monkeypatch.setenv("PROJETS_OLLAMA", "yes")
    monkeypatch.setenv("PROJETS_OLLAMA_URL", "http://gpu-box:11434/")
    monkeypatch.setenv("PROJETS_OLLAMA_MODEL", "mistral")
    monkeypatch.setenv("PROJETS_OLLAMA_TIMEOUT", "5")
    monkeypatch.setenv("PROJETS_GIT_TIMEOUT", "2.5")
    monkeypatch.setenv("PROJETS_WORKERS", "3")
    monkeypatch.setenv("PROJETS_EXCLUDE", ".git, vendor ,,")

    config = Config.from_env()
    assert config.projects_dir == Path("/custom/projects")
    assert config.index_file == Path("/custom/index.json")
    assert config.ollama is True
    assert config.ollama_url == "http://gpu-box:11434"
    assert config.ollama_model == "mistral"
    assert config.ollama_timeout == 5.0
    assert config.git_timeout == 2.5
    assert config.workers == 3
    assert config.exclude == (".git", "vendor")


def test_config_tilde_expansion(monkeypatch):
    """Test config expands tilde in paths."""
    monkeypatch.setenv("PROJETS_DIR", "~/code")
    config = Config.from_env()
    assert "~" not in str(config.projects_dir)
    assert config.projects_dir.is_absolute()


@pytest.mark.parametrize(
    "name,value,message",
    [
        ("PROJETS_WORKERS", "many", "Invalid PROJETS_WORKERS"),
        ("PROJETS_WORKERS", "0", "must be >= 1"),
        ("PROJETS_OLLAMA_TIMEOUT", "soon", "Invalid PROJETS_OLLAMA_TIMEOUT"),
        ("PROJETS_GIT_TIMEOUT", "-1", "must be > 0"),
        ("PROJETS_OLLAMA", "maybe", "expected a boolean"),
    ],
)
def test_config_invalid_env_values(monkeypatch, name, value, message):
    """Test config raises ConfigurationError for bad values."""
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError, match=message):
        Config.from_env()


def test_config_from_yaml_file(tmp_path):
    """Test values are read from the YAML config file."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "projects_dir: /yaml/projects\n"
        "ollama: true\n"
        "ollama_model: llama3\n"
        "workers: 2\n"
        "exclude:\n"
        "  - .git\n"
        "  - dist\n"
    )
    config = Config.from_env(config_file=path)
    assert config.projects_dir == Path("/yaml/projects")
    assert config.ollama is True
    assert config.ollama_model == "llama3"
    assert config.workers == 2
    assert config.exclude == (".git", "dist")


def test_config_file_from_env_var(monkeypatch, tmp_path):
    """Test PROJETS_CONFIG points at the config file."""
    path = tmp_path / "other.yaml"
    path.write_text("index_file: /yaml/index.json\n")
    monkeypatch.setenv("PROJETS_CONFIG", str(path))
    assert Config.from_env().index_file == Path("/yaml/index.json")


def test_env_overrides_yaml_file(monkeypatch, tmp_path):
    """Test environment variables take precedence over the file."""
    path = tmp_path / "config.yaml"
    path.write_text("ollama_model: llama3\nworkers: 2\n")
    monkeypatch.setenv("PROJETS_OLLAMA_MODEL", "mistral")
    config = Config.from_env(config_file=path)
    assert config.ollama_model == "mistral"
    assert config.workers == 2


def test_invalid_value_in_yaml_file_names_the_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("workers: lots\n")
    with pytest.raises(ConfigurationError, match="workers .in .*config.yaml"):
        Config.from_env(config_file=path)


class TestLoadConfigFile:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_config_file(tmp_path / "nope.yaml") == {}

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("workers: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config_file(path)


class TestParseExclude:
    def test_comma_separated(self):
        assert parse_exclude(" .git,node_modules , ,target") == (".git", "node_modules", "target")

    def test_list(self):
        assert parse_exclude(["a", " b "]) == ("a", "b")


class TestIndexerConfig:
    def test_defaults(self, tmp_path):
        config = IndexerConfig(projects_dir=tmp_path, index_file=tmp_path / "i.json")
        assert config.min_depth == 3
        assert config.max_depth == 3
        assert config.enable_ollama is False
        assert config.skip_hidden is False
        assert config.workers >= 1
        config.validate()

    def test_equal_depths_are_valid(self, tmp_path):
        IndexerConfig(tmp_path, tmp_path / "i.json", min_depth=0, max_depth=0).validate()

    def test_min_greater_than_max(self, tmp_path):
        config = IndexerConfig(tmp_path, tmp_path / "i.json", min_depth=3, max_depth=2)
        with pytest.raises(ConfigurationError, match="exceeds maximum depth"):
            config.validate()

    def test_missing_root(self, tmp_path):
        config = IndexerConfig(tmp_path / "missing", tmp_path / "i.json")
        with pytest.raises(ConfigurationError, match="does not exist"):
            config.validate()
