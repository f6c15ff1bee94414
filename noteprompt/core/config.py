"""
Configuration Management.

Loads settings from config/settings/*.yaml, located via the .project_root
marker file. There are no secrets and no environment-variable overrides;
components that take configuration also accept explicit values so the
library can be used without a project checkout.

Settings (YAML):
    application.yaml   - App identity
    database.yaml      - SQLite store location and engine echo
    logging.yaml       - Logging configuration
    editor.yaml        - Autosave interval, soft length guideline, previews
    shortcuts.yaml     - iOS Shortcuts forwarding
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from noteprompt.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    EditorSchema,
    LoggingSchema,
    ShortcutsSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._editor = _load_validated(EditorSchema, "editor.yaml")
        self._shortcuts = _load_validated(ShortcutsSchema, "shortcuts.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def editor(self) -> EditorSchema:
        """Editor settings (autosave, length guideline, previews)."""
        return self._editor

    @property
    def shortcuts(self) -> ShortcutsSchema:
        """iOS Shortcuts forwarding settings."""
        return self._shortcuts


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url() -> str:
    """
    Construct the SQLite database URL from database.yaml.

    Relative paths are resolved against the project root.

    Returns:
        Async SQLAlchemy URL using the aiosqlite driver.
    """
    path = Path(get_app_config().database.path)
    if not path.is_absolute():
        path = find_project_root() / path
    return f"sqlite+aiosqlite:///{path}"
