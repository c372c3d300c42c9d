"""
Abstract Remote Sync Interface

The remote side is optional and best-effort. The core only needs one
thing from it: take a batch of events and say which ids were accepted.
Transport, auth and retries are the implementation's business.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from budget_calendar.models.event import Event
from budget_calendar.models.sync import SyncResult


class RemoteSyncInterface(ABC):
    """Pushes events to a remote system."""

    @abstractmethod
    async def push_events(self, events: Sequence[Event]) -> SyncResult:
        """
        Send a batch of events.

        Args:
            events: Events to push, in wire form on the remote side

        Returns:
            Which ids were accepted (synced) and which were not (failed)
        """
        pass
