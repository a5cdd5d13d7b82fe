"""Configuration loading for dogwalk."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .logs.models import DEFAULT_USER_NAME


@dataclass
class RemoteConfig:
    """Remote REST backend for walk logs."""

    url: str = ""  # Empty disables remote sync
    api_key: str = ""
    table: str = "walk_logs"
    timeout: float = 30.0


@dataclass
class StorageConfig:
    db_path: str = "~/.dogwalk/dogwalk.db"


@dataclass
class UserConfig:
    default_name: str = DEFAULT_USER_NAME


@dataclass
class Config:
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    user: UserConfig = field(default_factory=UserConfig)


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with DOGWALK_ prefix."""
    return os.environ.get(f"DOGWALK_{key}", default)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    # Remote overrides
    if url := _get_env("REMOTE_URL"):
        config.remote.url = url
    if api_key := _get_env("REMOTE_API_KEY"):
        config.remote.api_key = api_key
    if table := _get_env("REMOTE_TABLE"):
        config.remote.table = table
    if timeout := _get_env("REMOTE_TIMEOUT"):
        config.remote.timeout = float(timeout)

    # Storage overrides
    if db_path := _get_env("STORAGE_DB_PATH"):
        config.storage.db_path = db_path

    # User overrides
    if default_name := _get_env("USER_DEFAULT_NAME"):
        config.user.default_name = default_name

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. If None or missing, uses
            default config.

    Returns:
        Loaded Config object.
    """
    config = Config()

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

            # Parse remote config
            if "remote" in data:
                remote_data = data["remote"]
                config.remote = RemoteConfig(
                    url=remote_data.get("url", config.remote.url),
                    api_key=remote_data.get("api_key", config.remote.api_key),
                    table=remote_data.get("table", config.remote.table),
                    timeout=float(remote_data.get("timeout", config.remote.timeout)),
                )

            # Parse storage config
            if "storage" in data:
                config.storage = StorageConfig(
                    db_path=data["storage"].get("db_path", config.storage.db_path)
                )

            # Parse user config
            if "user" in data:
                config.user = UserConfig(
                    default_name=data["user"].get(
                        "default_name", config.user.default_name
                    )
                )

    return _apply_env_overrides(config)
