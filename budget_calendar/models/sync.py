"""Sync Models - what the remote side reported and what a sync run did."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SyncResult(BaseModel):
    """Remote acknowledgment of a pushed batch."""

    synced: list[str] = Field(
        default_factory=list,
        description="Ids the remote accepted"
    )
    failed: list[str] = Field(
        default_factory=list,
        description="Ids the remote rejected or never received"
    )


class SyncReport(BaseModel):
    """Summary of one sync run."""

    attempted: int = Field(default=0, ge=0)
    synced: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    last_synced_at: Optional[datetime] = None

    @property
    def nothing_to_do(self) -> bool:
        return self.attempted == 0
