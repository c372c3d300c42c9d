"""
HTTP Sync Client

Talks to the sync API:
- POST {base}/events/sync  {"events": [...]}  ->  {"synced": [...], "failed": [...]}
- GET  {base}/health

DESIGN DECISION: push_events never raises for remote problems.
Connection errors, bad status codes and malformed replies all come back
as "every id failed". Unsynced events stay unsynced and are retried on
the next run; local use is never blocked by the network.

Transport errors are retried with exponential backoff before giving up.
"""

from typing import Any, Optional, Sequence

import httpx
import structlog
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budget_calendar.config import SyncSettings, get_settings
from budget_calendar.models.event import Event
from budget_calendar.models.sync import SyncResult
from budget_calendar.services.sync.interface import RemoteSyncInterface


logger = structlog.get_logger(__name__)


def _safe_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if isinstance(message, str) and message.strip():
            return " ".join(message.split())[:200]
    return response.reason_phrase or f"HTTP {response.status_code}"


class HttpSyncClient(RemoteSyncInterface):
    """
    Remote sync over HTTP.

    Pass an httpx.AsyncClient to share a connection pool (or to test);
    otherwise the client creates and owns one.
    """

    def __init__(
        self,
        settings: Optional[SyncSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings().sync
        if not self._settings.api_base_url:
            raise ValueError("Sync API base URL is not configured")

        self._base_url = self._settings.api_base_url
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._settings.auth_token:
            headers["Authorization"] = f"Bearer {self._settings.auth_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request, retrying transport failures."""
        url = f"{self._base_url}{path}"
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(
                multiplier=self._settings.retry_backoff_seconds,
                max=10,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._http_client.request(
                    method,
                    url,
                    json=json_body,
                    headers=self._headers(),
                    timeout=self._settings.timeout_seconds,
                )
        raise RuntimeError("unreachable")  # pragma: no cover

    async def push_events(self, events: Sequence[Event]) -> SyncResult:
        """Push a batch. Remote failures mark every id as failed."""
        ids = [event.id for event in events]
        if not ids:
            return SyncResult()

        try:
            response = await self._request(
                "POST",
                "/events/sync",
                json_body={"events": [event.to_wire() for event in events]},
            )
        except httpx.HTTPError as e:
            logger.warning("sync_request_failed", error=str(e), count=len(ids))
            return SyncResult(failed=ids)

        if not response.is_success:
            logger.warning(
                "sync_rejected",
                status_code=response.status_code,
                error=_safe_error_message(response),
                count=len(ids),
            )
            return SyncResult(failed=ids)

        try:
            reply = SyncResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("sync_reply_invalid", error=str(e), count=len(ids))
            return SyncResult(failed=ids)

        sent = set(ids)
        synced = [event_id for event_id in dict.fromkeys(reply.synced) if event_id in sent]
        accepted = set(synced)
        failed = [event_id for event_id in ids if event_id not in accepted]

        logger.info("sync_pushed", synced=len(synced), failed=len(failed))
        return SyncResult(synced=synced, failed=failed)

    async def health_check(self) -> bool:
        """True if the sync API answers its health endpoint."""
        try:
            response = await self._http_client.get(
                f"{self._base_url}/health",
                headers=self._headers(),
                timeout=self._settings.timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.debug("sync_health_check_failed", error=str(e))
            return False
        return response.is_success

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "HttpSyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
