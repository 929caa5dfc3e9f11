from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EventKind
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    """Event side of the record store gateway (append-only apart from corrections)."""

    def insert_event(self, event: AttendanceEvent) -> None:
        """Raises StoreWriteFailure when the store rejects the write."""
        raise NotImplementedError

    def update_event(self, event_id: str, *, timestamp: int, kind: EventKind) -> None:
        """Admin-only rewrite of timestamp and kind. Photo, owner and coordinate never change."""
        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_by_user(self, user_id: str) -> Sequence[AttendanceEvent]:
        """Events of one user, newest first."""
        raise NotImplementedError

    def list_by_range(self, start_millis: int, end_millis: int) -> Sequence[AttendanceEvent]:
        """Events with start <= timestamp <= end, newest first."""
        raise NotImplementedError
