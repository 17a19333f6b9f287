"""Configuration module for the snippet manager.

Provides the :class:`SnippetConfig` class which decides where the snippet
store lives and how chatty logging is.  Configuration is resolved in
priority order:

1. **Environment variables** (highest priority) -- ``SNIPPET_*``
2. **Config file** -- ``<storage_path>/config.json``
3. **Defaults** (lowest priority) -- ``~/.snippets/snippets.json``

Typical usage::

    config = SnippetConfig.load()                          # defaults + file + env
    config = SnippetConfig(storage_path="/custom/dir")     # programmatic construction

    print(config.store_path)   # /home/me/.snippets/snippets.json
    print(config.log_level)    # "WARNING" (or overridden value)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from snippet_manager.errors import StorageIOError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Default storage directory name, placed in the user's home directory.
DEFAULT_STORAGE_DIR_NAME = ".snippets"

# Default store document name inside the storage directory.
DEFAULT_STORE_FILE_NAME = "snippets.json"

# Config file name inside the storage directory.
CONFIG_FILE_NAME = "config.json"

# Environment variable prefix, e.g. ``SNIPPET_STORAGE_PATH=/tmp/snips``.
ENV_PREFIX = "SNIPPET_"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class SnippetConfig(BaseModel):
    """Centralised configuration for the snippet manager.

    Attributes
    ----------
    storage_path:
        Absolute path to the storage directory.  When not set explicitly it
        is ``~/.snippets``.
    store_file_name:
        Name of the JSON store document inside ``storage_path``.
    log_level:
        Python logging level name.  One of ``DEBUG``, ``INFO``, ``WARNING``,
        ``ERROR``, ``CRITICAL``.
    """

    storage_path: Optional[str] = Field(
        default=None,
        description="Absolute path to the snippet storage directory.",
    )
    store_file_name: str = Field(
        default=DEFAULT_STORE_FILE_NAME,
        min_length=1,
        description="File name of the JSON store inside the storage directory.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def resolve_storage_path(self) -> "SnippetConfig":
        """Resolve ``storage_path`` to an absolute path.

        Falls back to the per-user default directory.  Raises
        StorageIOError if the home directory cannot be determined.
        """
        if self.storage_path is not None:
            self.storage_path = str(Path(self.storage_path).expanduser().resolve())
        else:
            self.storage_path = str(default_storage_dir())
        return self

    @model_validator(mode="after")
    def validate_log_level(self) -> "SnippetConfig":
        """Normalise and validate the log level string."""
        normalised = self.log_level.upper().strip()
        if normalised not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}."
            )
        self.log_level = normalised
        return self

    # ------------------------------------------------------------------
    # Factory: load from file + environment
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        storage_path: Optional[str] = None,
        config_path: Optional[str] = None,
    ) -> "SnippetConfig":
        """Load configuration with full resolution: env -> file -> defaults.

        Parameters
        ----------
        storage_path:
            Explicit storage directory, e.g. from a command-line option.
            Takes precedence over every other source.
        config_path:
            Explicit path to a ``config.json`` file.  When *None*, the file
            is looked up inside the resolved storage directory.
        """
        env_values = _load_env_overrides()

        # The storage directory must be known before the config file inside
        # it can be read.
        if storage_path is not None:
            resolved_dir = Path(storage_path).expanduser().resolve()
        elif "storage_path" in env_values:
            resolved_dir = Path(env_values["storage_path"]).expanduser().resolve()
        else:
            resolved_dir = default_storage_dir()

        file_values = _load_config_file(resolved_dir, config_path)

        merged: dict = {}
        merged.update(file_values)
        merged.update(env_values)
        if storage_path is not None or "storage_path" not in merged:
            merged["storage_path"] = str(resolved_dir)

        return cls.model_validate(merged)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def store_path(self) -> Path:
        """Full path of the JSON store document."""
        return Path(self.storage_path) / self.store_file_name

    def configure_logging(self) -> None:
        """Apply the configured log level to the ``snippet_manager`` logger.

        Adds one stderr handler the first time it is called.
        """
        pkg_logger = logging.getLogger("snippet_manager")
        pkg_logger.setLevel(self.log_level)

        if not pkg_logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(self.log_level)
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            pkg_logger.addHandler(handler)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def default_storage_dir() -> Path:
    """Return ``~/.snippets`` for the current user.

    Raises StorageIOError if the home directory cannot be determined.
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise StorageIOError("~", "Error getting home directory") from exc
    return home / DEFAULT_STORAGE_DIR_NAME


def _load_config_file(
    storage_dir: Path,
    config_path: Optional[str] = None,
) -> dict:
    """Read a ``config.json`` file and return its contents as a dict.

    Returns an empty dict if the file does not exist or is malformed.
    """
    if config_path is not None:
        path = Path(config_path).expanduser().resolve()
    else:
        path = storage_dir / CONFIG_FILE_NAME

    if not path.is_file():
        logger.debug("No config file at %s. Using defaults.", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
    except json.JSONDecodeError:
        logger.warning(
            "Config file %s contains invalid JSON. Ignoring.",
            path,
            exc_info=True,
        )
        return {}
    except OSError:
        logger.warning(
            "Could not read config file %s. Ignoring.",
            path,
            exc_info=True,
        )
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "Config file %s does not contain a JSON object. Ignoring.",
            path,
        )
        return {}

    known = {k: v for k, v in data.items() if k in SnippetConfig.model_fields}
    logger.debug("Loaded configuration from %s", path)
    return known


def _load_env_overrides() -> dict:
    """Read ``SNIPPET_*`` environment variables and return overrides.

    Supported variables:

    - ``SNIPPET_STORAGE_PATH`` -- override storage_path
    - ``SNIPPET_STORE_FILE`` -- override store_file_name
    - ``SNIPPET_LOG_LEVEL`` -- override log_level
    """
    overrides: dict = {}

    storage_path = os.environ.get(f"{ENV_PREFIX}STORAGE_PATH")
    if storage_path:
        overrides["storage_path"] = storage_path

    store_file = os.environ.get(f"{ENV_PREFIX}STORE_FILE")
    if store_file:
        overrides["store_file_name"] = store_file

    log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if log_level:
        overrides["log_level"] = log_level

    if overrides:
        logger.debug(
            "Environment overrides applied: %s",
            ", ".join(overrides.keys()),
        )

    return overrides
