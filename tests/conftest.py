"""Shared fixtures for dogwalk tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from dogwalk.logs import BathroomActivity, WalkLog, WalkQuality
from dogwalk.storage import MemorySettingsStore
from dogwalk.sync import SyncOperation, SyncResult, SyncStatus, WalkLogRemote

BASE_TIME = datetime(2025, 7, 12, 9, 30, tzinfo=timezone.utc)


def make_log(
    log_id: str,
    quality: WalkQuality = WalkQuality.GOOD,
    minutes: int = 0,
    bathroom: BathroomActivity = BathroomActivity.PEE,
    notes: str | None = None,
) -> WalkLog:
    """Build a log with a fixed id, `minutes` after a base time."""
    return WalkLog(
        id=log_id,
        date=BASE_TIME + timedelta(minutes=minutes),
        quality=quality,
        bathroom=bathroom,
        user_name="Sam",
        notes=notes,
    )


def success(operation: SyncOperation, **kwargs) -> SyncResult:
    return SyncResult(operation=operation, status=SyncStatus.SUCCESS, **kwargs)


def offline(operation: SyncOperation, **kwargs) -> SyncResult:
    return SyncResult(
        operation=operation,
        status=SyncStatus.OFFLINE,
        error="Connection refused",
        **kwargs,
    )


@pytest.fixture
def store():
    """Create an empty in-memory settings store."""
    return MemorySettingsStore()


@pytest.fixture
def remote():
    """Create a mock remote that accepts writes and is offline for reads.

    Reads fail by default so the initial fetch leaves cached state alone;
    tests override `fetch_all` to simulate a reachable backend.
    """
    remote = MagicMock(spec=WalkLogRemote)
    remote.create = AsyncMock(
        side_effect=lambda log: success(SyncOperation.CREATE, log_id=log.id)
    )
    remote.update = AsyncMock(
        side_effect=lambda log: success(SyncOperation.UPDATE, log_id=log.id)
    )
    remote.delete = AsyncMock(
        side_effect=lambda log_id: success(SyncOperation.DELETE, log_id=log_id)
    )
    remote.fetch_all = AsyncMock(return_value=offline(SyncOperation.FETCH))
    remote.close = AsyncMock()
    return remote
