"""Local cache of the walk log collection.

The whole collection is stored as one JSON array under a single settings
key and rewritten on every change.
"""

import json
import logging
from collections.abc import Iterable

from ..logs.models import WalkLog
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

LOGS_KEY = "dogWalkLogs"
USER_NAME_KEY = "userName"


def encode_logs(logs: Iterable[WalkLog]) -> str:
    """Serialize logs to the JSON blob format."""
    return json.dumps([log.to_dict() for log in logs])


def decode_logs(blob: str) -> list[WalkLog]:
    """Parse a JSON blob of logs.

    Raises:
        ValueError: The blob is not a JSON array of valid walk log records.
    """
    data = json.loads(blob)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of logs, got {type(data).__name__}")

    logs = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"Expected a log object, got {type(item).__name__}")
        try:
            logs.append(WalkLog.from_dict(item))
        except KeyError as e:
            raise ValueError(f"Log record missing field {e}") from e
    return logs


class LogCache:
    """Reads and writes the cached log collection in a settings store."""

    def __init__(self, store: SettingsStore, key: str = LOGS_KEY):
        self.store = store
        self.key = key

    def load(self) -> list[WalkLog]:
        """Load cached logs. Absent or malformed data yields an empty list."""
        blob = self.store.get(self.key)
        if blob is None:
            return []

        try:
            logs = decode_logs(blob)
        except ValueError as e:
            logger.warning(f"Discarding unreadable log cache: {e}")
            return []

        logger.debug(f"Loaded {len(logs)} cached logs")
        return logs

    def save(self, logs: Iterable[WalkLog]) -> None:
        """Overwrite the cached collection."""
        self.store.set(self.key, encode_logs(logs))
