"""Local persistence for walk logs and user settings."""

from .log_cache import LOGS_KEY, USER_NAME_KEY, LogCache, decode_logs, encode_logs
from .settings_store import MemorySettingsStore, SettingsStore, SQLiteSettingsStore

__all__ = [
    "LOGS_KEY",
    "USER_NAME_KEY",
    "LogCache",
    "MemorySettingsStore",
    "SQLiteSettingsStore",
    "SettingsStore",
    "decode_logs",
    "encode_logs",
]
