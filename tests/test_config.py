"""Tests for SnippetConfig -- configuration and settings module.

All tests use real files in temporary directories and real environment
variables set through monkeypatch.
"""

import json
import logging
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from snippet_manager.config import (
    CONFIG_FILE_NAME,
    DEFAULT_STORAGE_DIR_NAME,
    DEFAULT_STORE_FILE_NAME,
    ENV_PREFIX,
    SnippetConfig,
    _load_config_file,
    _load_env_overrides,
    default_storage_dir,
)
from snippet_manager.errors import StorageIOError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all SNIPPET_* env vars for the duration of each test."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)


@pytest.fixture()
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the home directory at a temp dir."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture()
def storage_dir(tmp_path: Path) -> Path:
    path = tmp_path / "snips"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_default_storage_in_home(self, fake_home: Path) -> None:
        config = SnippetConfig()
        assert config.storage_path == str(fake_home / DEFAULT_STORAGE_DIR_NAME)

    def test_default_store_path(self, fake_home: Path) -> None:
        config = SnippetConfig()
        assert config.store_path == fake_home / ".snippets" / "snippets.json"

    def test_default_log_level(self, fake_home: Path) -> None:
        assert SnippetConfig().log_level == "WARNING"

    def test_explicit_storage_path_resolved(self, tmp_path: Path) -> None:
        config = SnippetConfig(storage_path=str(tmp_path / "a" / ".." / "b"))
        assert config.storage_path == str((tmp_path / "b").resolve())

    def test_default_storage_dir_helper(self, fake_home: Path) -> None:
        assert default_storage_dir() == fake_home / ".snippets"

    def test_home_lookup_failure_is_io_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def no_home() -> Path:
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", staticmethod(no_home))
        with pytest.raises(StorageIOError, match="home directory"):
            SnippetConfig()


class TestLogLevel:
    def test_normalised(self, storage_dir: Path) -> None:
        config = SnippetConfig(storage_path=str(storage_dir), log_level=" debug ")
        assert config.log_level == "DEBUG"

    def test_invalid_rejected(self, storage_dir: Path) -> None:
        with pytest.raises(ValidationError):
            SnippetConfig(storage_path=str(storage_dir), log_level="LOUD")

    def test_configure_logging_sets_level(self, storage_dir: Path) -> None:
        pkg_logger = logging.getLogger("snippet_manager")
        saved_handlers = list(pkg_logger.handlers)
        saved_level = pkg_logger.level
        try:
            pkg_logger.handlers.clear()
            config = SnippetConfig(storage_path=str(storage_dir), log_level="INFO")
            config.configure_logging()
            config.configure_logging()
            assert pkg_logger.level == logging.INFO
            assert len(pkg_logger.handlers) == 1
        finally:
            pkg_logger.handlers[:] = saved_handlers
            pkg_logger.setLevel(saved_level)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_load_without_file_or_env(self, fake_home: Path) -> None:
        config = SnippetConfig.load()
        assert config.store_path == fake_home / ".snippets" / DEFAULT_STORE_FILE_NAME

    def test_file_values_applied(self, storage_dir: Path) -> None:
        (storage_dir / CONFIG_FILE_NAME).write_text(
            json.dumps({"log_level": "ERROR", "store_file_name": "mine.json"}),
            encoding="utf-8",
        )
        config = SnippetConfig.load(storage_path=str(storage_dir))
        assert config.log_level == "ERROR"
        assert config.store_path == storage_dir.resolve() / "mine.json"

    def test_env_overrides_file(
        self, storage_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (storage_dir / CONFIG_FILE_NAME).write_text(
            json.dumps({"log_level": "ERROR"}), encoding="utf-8"
        )
        monkeypatch.setenv(f"{ENV_PREFIX}LOG_LEVEL", "DEBUG")
        config = SnippetConfig.load(storage_path=str(storage_dir))
        assert config.log_level == "DEBUG"

    def test_env_storage_path(
        self, storage_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(f"{ENV_PREFIX}STORAGE_PATH", str(storage_dir))
        config = SnippetConfig.load()
        assert config.storage_path == str(storage_dir.resolve())

    def test_explicit_storage_path_beats_env(
        self, storage_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(f"{ENV_PREFIX}STORAGE_PATH", str(tmp_path / "other"))
        config = SnippetConfig.load(storage_path=str(storage_dir))
        assert config.storage_path == str(storage_dir.resolve())

    def test_malformed_config_file_ignored(self, storage_dir: Path) -> None:
        (storage_dir / CONFIG_FILE_NAME).write_text("{oops", encoding="utf-8")
        config = SnippetConfig.load(storage_path=str(storage_dir))
        assert config.log_level == "WARNING"


class TestHelpers:
    def test_load_config_file_missing(self, storage_dir: Path) -> None:
        assert _load_config_file(storage_dir) == {}

    def test_load_config_file_non_object(self, storage_dir: Path) -> None:
        (storage_dir / CONFIG_FILE_NAME).write_text("[1, 2]", encoding="utf-8")
        assert _load_config_file(storage_dir) == {}

    def test_load_config_file_drops_unknown_keys(self, storage_dir: Path) -> None:
        (storage_dir / CONFIG_FILE_NAME).write_text(
            json.dumps({"log_level": "INFO", "colour": "blue"}), encoding="utf-8"
        )
        assert _load_config_file(storage_dir) == {"log_level": "INFO"}

    def test_explicit_config_path(self, tmp_path: Path, storage_dir: Path) -> None:
        other = tmp_path / "elsewhere.json"
        other.write_text(json.dumps({"log_level": "CRITICAL"}), encoding="utf-8")
        assert _load_config_file(storage_dir, str(other)) == {"log_level": "CRITICAL"}

    def test_env_overrides_empty(self) -> None:
        assert _load_env_overrides() == {}

    def test_env_overrides_collected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(f"{ENV_PREFIX}STORAGE_PATH", "/tmp/s")
        monkeypatch.setenv(f"{ENV_PREFIX}STORE_FILE", "x.json")
        monkeypatch.setenv(f"{ENV_PREFIX}LOG_LEVEL", "info")
        assert _load_env_overrides() == {
            "storage_path": "/tmp/s",
            "store_file_name": "x.json",
            "log_level": "info",
        }
