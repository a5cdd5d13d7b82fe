"""Walk log sync service.

Owns the in-memory collection of walk logs, mirrors it to the local cache
and mirrors every mutation to the remote table.

Local state always wins in the moment: mutations update the collection and
the cache synchronously, then fire the remote request as a background task
whose outcome is only logged. A successful fetch replaces the collection
wholesale with the remote rows.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from ..logs.models import DEFAULT_USER_NAME, WalkLog, WalkQuality
from ..logs.stats import WalkStats, compute_stats, filter_by_quality
from ..storage.log_cache import USER_NAME_KEY, LogCache
from ..storage.settings_store import SettingsStore
from .remote import SyncResult, WalkLogRemote

logger = logging.getLogger(__name__)

EntriesListener = Callable[[tuple[WalkLog, ...]], None]


class WalkLogService:
    """Local-first store of walk logs with best-effort remote sync.

    All methods must be called from the thread running the event loop.
    Remote calls run as tasks on that loop and apply their results there,
    so the collection has a single writer.
    """

    def __init__(
        self,
        store: SettingsStore,
        remote: WalkLogRemote,
        default_user_name: str = DEFAULT_USER_NAME,
    ):
        """Load cached logs and start the initial fetch.

        Args:
            store: Settings store holding the log cache and user name.
            remote: Client for the remote table.
            default_user_name: Name returned when none has been saved.
        """
        self.store = store
        self.remote = remote
        self.default_user_name = default_user_name
        self.cache = LogCache(store)

        self._entries: list[WalkLog] = self.cache.load()
        self._listeners: list[EntriesListener] = []
        self._pending: set[asyncio.Task] = set()
        self._last_result: SyncResult | None = None

        logger.info(f"Loaded {len(self._entries)} walk logs from local cache")
        self.fetch()

    @property
    def entries(self) -> tuple[WalkLog, ...]:
        """Snapshot of the current collection."""
        return tuple(self._entries)

    @property
    def last_result(self) -> SyncResult | None:
        """Most recent remote outcome, for diagnostics."""
        return self._last_result

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def subscribe(self, listener: EntriesListener) -> Callable[[], None]:
        """Register a listener for collection changes.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.entries
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Entries listener failed")

    def _persist(self) -> None:
        self.cache.save(self._entries)

    def _spawn(
        self, coro: Coroutine[Any, Any, SyncResult], label: str
    ) -> asyncio.Task | None:
        """Run a remote call in the background."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning(f"No running event loop, skipping remote {label}")
            return None

        task = loop.create_task(coro, name=f"walk-log-{label}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _push(
        self,
        description: str,
        call: Callable[..., Awaitable[SyncResult]],
        *args: Any,
    ) -> SyncResult:
        result = await call(*args)
        self._last_result = result
        if result.ok:
            logger.info(f"{description} synced")
        else:
            logger.error(f"{description} sync failed ({result.status.value}): {result.error}")
        return result

    def add(self, log: WalkLog) -> None:
        """Insert a new log at the front and push it to the remote."""
        log_id = log.require_id()

        self._entries.insert(0, log)
        self._notify()
        self._persist()

        self._spawn(self._push(f"Create {log_id}", self.remote.create, log), "create")

    def update(self, log: WalkLog) -> bool:
        """Replace the log with the same id.

        Returns:
            False if no log has that id; nothing changes in that case.
        """
        log_id = log.require_id()

        for index, existing in enumerate(self._entries):
            if existing.id == log_id:
                break
        else:
            logger.debug(f"Update ignored, no log with id {log_id}")
            return False

        self._entries[index] = log
        self._notify()
        self._persist()

        self._spawn(self._push(f"Update {log_id}", self.remote.update, log), "update")
        return True

    def delete(self, log: WalkLog) -> bool:
        """Remove every log with the same id and delete it remotely.

        Returns:
            False if no log had that id; nothing changes in that case.
        """
        log_id = log.require_id()

        remaining = [entry for entry in self._entries if entry.id != log_id]
        if len(remaining) == len(self._entries):
            logger.debug(f"Delete ignored, no log with id {log_id}")
            return False

        self._entries = remaining
        self._notify()
        self._persist()

        self._spawn(self._push(f"Delete {log_id}", self.remote.delete, log_id), "delete")
        return True

    def fetch(self, force: bool = False) -> asyncio.Task | None:
        """Refresh the collection from the remote table.

        Every call sends a new request. Overlapping fetches apply in
        completion order, so the last response to arrive wins.
        Failures leave the collection untouched and are only logged.

        Args:
            force: Accepted for callers that ask for a forced refresh;
                every fetch already goes to the remote.

        Returns:
            Task resolving to the SyncResult, or None without an event loop.
        """
        return self._spawn(self._run_fetch(), "fetch")

    async def _run_fetch(self) -> SyncResult:
        result = await self.remote.fetch_all()
        self._last_result = result

        if not result.ok:
            logger.error(f"Fetch failed ({result.status.value}): {result.error}")
            return result

        self._apply_fetched(result.logs or [])
        return result

    def _apply_fetched(self, fetched: list[WalkLog]) -> None:
        remote_ids = {log.id for log in fetched}
        dropped = [log for log in self._entries if log.id not in remote_ids]
        if dropped:
            logger.warning(
                f"Fetch replaced {len(dropped)} local logs missing from the remote"
            )

        self._entries = sorted(fetched, key=lambda log: log.date, reverse=True)
        self._notify()
        self._persist()
        logger.info(f"Fetched {len(self._entries)} walk logs")

    def stats(self) -> WalkStats:
        return compute_stats(self._entries)

    def filtered(self, quality: WalkQuality | None) -> list[WalkLog]:
        """Logs of one quality, newest first as held."""
        return filter_by_quality(self._entries, quality)

    def find(self, log_id: str) -> WalkLog | None:
        """Look up a log by id, accepting a unique id prefix."""
        if not log_id:
            return None
        matches = [log for log in self._entries if log.id and log.id.startswith(log_id)]
        if len(matches) == 1:
            return matches[0]
        return None

    def get_user_name(self) -> str:
        user_name = self.store.get(USER_NAME_KEY)
        return user_name if user_name is not None else self.default_user_name

    def save_settings(self, user_name: str) -> None:
        """Save the display name used for new logs."""
        self.store.set(USER_NAME_KEY, user_name)
        logger.info(f"User name set to {user_name!r}")

    async def wait_idle(self) -> None:
        """Wait until every in-flight remote call has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Finish in-flight calls and close the remote client."""
        await self.wait_idle()
        await self.remote.close()
