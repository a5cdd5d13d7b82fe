"""Sync between the local walk log collection and the remote table.

The service is local-first: mutations land locally right away and are
pushed to the remote in the background without retries.
"""

from .remote import SyncOperation, SyncResult, SyncStatus, WalkLogRemote
from .service import WalkLogService

__all__ = [
    "SyncOperation",
    "SyncResult",
    "SyncStatus",
    "WalkLogRemote",
    "WalkLogService",
]
