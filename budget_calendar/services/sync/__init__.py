"""
Remote Sync Package

The remote API is optional. Nothing in the core depends on it being
configured or reachable.
"""

from budget_calendar.services.sync.http_client import HttpSyncClient
from budget_calendar.services.sync.interface import RemoteSyncInterface
from budget_calendar.services.sync.service import SyncService

__all__ = [
    "HttpSyncClient",
    "RemoteSyncInterface",
    "SyncService",
]
