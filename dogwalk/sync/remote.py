"""REST client for the remote `walk_logs` table.

Talks to a Supabase/PostgREST endpoint. Every call is a single attempt:
failures are reported in the returned SyncResult, never raised and never
retried.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import httpx

from ..logs.models import WalkLog

logger = logging.getLogger(__name__)


class SyncStatus(Enum):
    """Outcome of a remote call."""

    SUCCESS = "success"
    OFFLINE = "offline"  # Transport failure: unreachable, DNS, timeout
    HTTP_ERROR = "http_error"  # Non-2xx status
    DECODE_ERROR = "decode_error"  # Response body has the wrong shape
    FAILED = "failed"  # Not configured, or request could not be built


class SyncOperation(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    FETCH = "fetch"


@dataclass
class SyncResult:
    """Result of a remote call."""

    operation: SyncOperation
    status: SyncStatus
    log_id: str | None = None
    logs: list[WalkLog] | None = None
    status_code: int | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.status == SyncStatus.SUCCESS


class WalkLogRemote:
    """Client for the remote walk log table.

    Supports:
    - create: POST a new row
    - update: PUT a row filtered by id
    - delete: DELETE a row filtered by id, minimal response
    - fetch_all: GET every row
    """

    def __init__(
        self,
        base_url: str | None,
        api_key: str = "",
        table: str = "walk_logs",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the remote client.

        Args:
            base_url: Project URL (e.g., "https://xyz.supabase.co").
                Empty or None disables remote sync.
            api_key: Anonymous API key, sent as both apikey and bearer token.
            table: Name of the REST resource.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.table = table
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self, minimal: bool = False) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if minimal:
            headers["Prefer"] = "return=minimal"
        return headers

    async def _request(
        self,
        operation: SyncOperation,
        method: str,
        params: dict[str, str] | None = None,
        json_data: Any = None,
        minimal: bool = False,
        log_id: str | None = None,
    ) -> tuple[httpx.Response | None, SyncResult]:
        """Send one request and classify the outcome.

        Returns:
            Tuple of (response, result). The response is None unless the
            status code was 2xx.
        """
        if not self.configured:
            return None, SyncResult(
                operation=operation,
                status=SyncStatus.FAILED,
                log_id=log_id,
                error="No remote URL configured",
            )

        try:
            client = await self._get_client()
            response = await client.request(
                method,
                self.endpoint,
                params=params,
                json=json_data,
                headers=self._headers(minimal=minimal),
            )
        except httpx.TransportError as e:
            logger.warning(f"{method} {self.table} failed: {e!r}")
            return None, SyncResult(
                operation=operation,
                status=SyncStatus.OFFLINE,
                log_id=log_id,
                error=str(e) or type(e).__name__,
            )
        except Exception as e:
            logger.error(f"{method} {self.table} request error: {e}")
            return None, SyncResult(
                operation=operation,
                status=SyncStatus.FAILED,
                log_id=log_id,
                error=str(e),
            )

        if not 200 <= response.status_code <= 299:
            body = response.text or "No response body"
            logger.warning(
                f"{method} {self.table} returned HTTP {response.status_code}: {body}"
            )
            return None, SyncResult(
                operation=operation,
                status=SyncStatus.HTTP_ERROR,
                log_id=log_id,
                status_code=response.status_code,
                error=f"HTTP {response.status_code}: {body}",
            )

        return response, SyncResult(
            operation=operation,
            status=SyncStatus.SUCCESS,
            log_id=log_id,
            status_code=response.status_code,
        )

    async def create(self, log: WalkLog) -> SyncResult:
        """Insert a new row for the log."""
        _, result = await self._request(
            SyncOperation.CREATE,
            "POST",
            json_data=log.to_dict(),
            log_id=log.require_id(),
        )
        return result

    async def update(self, log: WalkLog) -> SyncResult:
        """Replace the row with the log's id."""
        log_id = log.require_id()
        _, result = await self._request(
            SyncOperation.UPDATE,
            "PUT",
            params={"id": f"eq.{log_id}"},
            json_data=log.to_dict(),
            log_id=log_id,
        )
        return result

    async def delete(self, log_id: str) -> SyncResult:
        """Delete the row with the given id."""
        _, result = await self._request(
            SyncOperation.DELETE,
            "DELETE",
            params={"id": f"eq.{log_id}"},
            minimal=True,
            log_id=log_id,
        )
        return result

    async def fetch_all(self) -> SyncResult:
        """Read every row.

        Returns:
            SyncResult whose `logs` holds the decoded rows on success.
        """
        response, result = await self._request(
            SyncOperation.FETCH,
            "GET",
            params={"select": "*"},
        )
        if response is None:
            return result

        try:
            data = response.json()
            if not isinstance(data, list):
                raise ValueError(f"Expected a list of rows, got {type(data).__name__}")
            result.logs = [WalkLog.from_dict(row) for row in data]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Could not decode {self.table} rows: {e!r}")
            result.status = SyncStatus.DECODE_ERROR
            result.error = f"Decode error: {e!r}"
            result.logs = None

        return result
