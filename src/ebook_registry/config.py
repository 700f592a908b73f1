"""Configuration loader for the ebook registry."""

import os
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Ebook Registry"
    version: str = "1.0.0"


class StorageConfig(BaseModel):
    """State store configuration."""

    backend: Literal["memory", "sqlite"] = "memory"
    sqlite_path: str = "./db/registry.db"


class HostConfig(BaseModel):
    """Host runtime configuration."""

    start_height: int = Field(default=0, ge=0)


class RegistryConfig(BaseModel):
    """Registry configuration."""

    admin: str | None = None  # reserved, not enforced by any operation


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment overrides
    admin = os.getenv("EBOOK_REGISTRY_ADMIN")
    if admin:
        config.registry.admin = admin
    log_level = os.getenv("EBOOK_REGISTRY_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level
    db_path = os.getenv("EBOOK_REGISTRY_DB_PATH")
    if db_path:
        config.storage.sqlite_path = db_path

    return config
