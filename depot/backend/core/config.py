"""
Ledger configuration.

Settings live in config/settings/*.yaml, one file per concern, each
checked against its schema in config_schema.py when first loaded. The
only secret, DB_PASSWORD, comes from the environment or config/.env.
Both are located relative to the directory holding .project_root.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from depot.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
    NotificationsSchema,
)

PROJECT_MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory to the first one holding .project_root."""
    for directory in (Path.cwd(), *Path.cwd().parents):
        if (directory / PROJECT_MARKER).exists():
            return directory
    raise RuntimeError(f"Project root not found. No {PROJECT_MARKER} above {Path.cwd()}.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read config/settings/<filename>; an empty file reads as {}."""
    path = find_project_root() / "config" / "settings" / filename
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets. Environment variables win over config/.env."""

    db_password: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_section(schema: type[BaseModel], filename: str) -> Any:
    try:
        return schema(**load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """All YAML sections, validated eagerly so a bad file fails at startup."""

    def __init__(self) -> None:
        self.application: ApplicationSchema = _load_section(ApplicationSchema, "application.yaml")
        self.database: DatabaseSchema = _load_section(DatabaseSchema, "database.yaml")
        self.logging: LoggingSchema = _load_section(LoggingSchema, "logging.yaml")
        self.notifications: NotificationsSchema = _load_section(
            NotificationsSchema, "notifications.yaml",
        )


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=str(find_project_root() / "config" / ".env"))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_database_url() -> str:
    """
    Async SQLAlchemy URL for the ledger store.

    For sqlite drivers the database name is the file path and no password
    is read; other drivers get user, password, host and port.
    """
    db = get_app_config().database
    if db.driver.startswith("sqlite"):
        return f"{db.driver}:///{db.name}"
    password = get_settings().db_password
    return f"{db.driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"


def get_server_address() -> tuple[str, int]:
    server = get_app_config().application.server
    return server.host, server.port
