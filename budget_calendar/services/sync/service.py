"""
Sync Service

Drives one push of local changes to the remote side:
1. Collect unsynced events from the store
2. Push them through the remote interface
3. Mark the accepted ids as synced (one batched write)
4. Record when the last successful sync happened

Events the remote did not accept keep their local/pending status and go
out again on the next run. Events the store never handed out are never
marked, whatever the remote claims.
"""

from typing import TYPE_CHECKING, Optional

import structlog

from budget_calendar.audit import AuditLogger, create_correlation_id
from budget_calendar.models.sync import SyncReport
from budget_calendar.services.sync.interface import RemoteSyncInterface

if TYPE_CHECKING:
    from budget_calendar.store.event_store import EventStore


logger = structlog.get_logger(__name__)


class SyncService:
    """Pushes unsynced events and records acknowledgments."""

    def __init__(
        self,
        store: "EventStore",
        remote: RemoteSyncInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._remote = remote
        self._audit_logger = audit_logger

    async def sync(self) -> SyncReport:
        """
        Run one sync pass.

        Remote failures are reported in the result, never raised.
        Storage failures while recording the outcome raise PersistenceError.
        """
        correlation_id = create_correlation_id()
        pending = await self._store.list_unsynced()

        if not pending:
            return SyncReport(last_synced_at=await self._store.last_synced_at())

        sent_ids = [event.id for event in pending]
        logger.info("sync_started", count=len(sent_ids), correlation_id=str(correlation_id))

        try:
            result = await self._remote.push_events(pending)
        except Exception as e:
            logger.error("sync_failed", error=str(e), count=len(sent_ids))
            if self._audit_logger:
                await self._audit_logger.log_sync_failed(
                    error_message=str(e),
                    attempted=len(sent_ids),
                    correlation_id=correlation_id,
                )
            return SyncReport(
                attempted=len(sent_ids),
                failed=sent_ids,
                last_synced_at=await self._store.last_synced_at(),
            )

        sent = set(sent_ids)
        synced = [event_id for event_id in dict.fromkeys(result.synced) if event_id in sent]
        accepted = set(synced)
        failed = [event_id for event_id in sent_ids if event_id not in accepted]

        if synced:
            await self._store.mark_synced(synced)
            last_synced_at = self._store.clock()
            await self._store.record_last_sync(last_synced_at)
        else:
            last_synced_at = await self._store.last_synced_at()

        if self._audit_logger:
            await self._audit_logger.log_sync_completed(
                synced=synced,
                failed=failed,
                correlation_id=correlation_id,
            )

        return SyncReport(
            attempted=len(sent_ids),
            synced=synced,
            failed=failed,
            last_synced_at=last_synced_at,
        )
