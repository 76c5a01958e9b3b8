"""
Configuration Management.

Loads machine-specific overrides from config/.env and settings from
config/settings/*.yaml. No hardcoded values in code; all configuration
comes from these sources.

Overrides (.env, all optional):
    NOTES_DATA_DIR, NOTES_DATABASE_PATH

Settings (YAML):
    application.yaml   - App identity
    storage.yaml       - Backing medium, cache timeout, storage deadline
    logging.yaml       - Logging configuration
    concurrency.yaml   - I/O thread pool sizing
"""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notekeeper.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    LoggingSchema,
    StorageSchema,
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


class Settings(BaseSettings):
    """Machine-specific overrides loaded from config/.env or the environment."""

    notes_data_dir: str | None = None
    notes_database_path: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


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
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def storage(self) -> StorageSchema:
        """Storage settings (backend, cache timeout, deadline)."""
        return self._storage

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (I/O thread pool)."""
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Get cached overrides instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def _resolve_path(configured: str) -> Path:
    """Resolve a configured path against the project root unless absolute."""
    path = Path(configured).expanduser()
    if path.is_absolute():
        return path
    return find_project_root() / path


def get_notes_directory() -> Path:
    """
    Directory holding one file per note for the file backend.

    NOTES_DATA_DIR wins over storage.yaml.
    """
    override = get_settings().notes_data_dir
    return _resolve_path(override or get_app_config().storage.file.directory)


def get_database_url() -> str:
    """
    Construct the aiosqlite database URL from storage.yaml and overrides.

    Returns:
        Database connection URL string.
    """
    override = get_settings().notes_database_path
    path = _resolve_path(override or get_app_config().storage.sqlite.path)
    return f"sqlite+aiosqlite:///{path}"


def get_cache_timeout() -> timedelta:
    """Age after which the cached note snapshot is considered stale."""
    return timedelta(minutes=get_app_config().storage.cache.timeout_minutes)
