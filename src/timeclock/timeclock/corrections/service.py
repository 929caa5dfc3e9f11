from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..attendance.model import AttendanceEvent
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import compose_millis
from ..core.enums import EventKind
from ..core.exceptions import AlternationViolation, NotFound
from ..users.session import SessionContext

_logger = logging.getLogger(__name__)


def sort_desc(events: Sequence[AttendanceEvent]) -> list[AttendanceEvent]:
    return sorted(events, key=lambda e: e.timestamp, reverse=True)


def check_alternation(history: Sequence[AttendanceEvent], updated: AttendanceEvent) -> None:
    """Reject `updated` if it lands next to an event of the same kind.

    Only the corrected event's neighbours are checked, so an already broken
    history elsewhere does not block fixing it one event at a time.
    """

    merged = sort_desc([updated if e.event_id == updated.event_id else e for e in history])
    idx = next(i for i, e in enumerate(merged) if e.event_id == updated.event_id)

    newer = merged[idx - 1] if idx > 0 else None
    older = merged[idx + 1] if idx + 1 < len(merged) else None

    if newer is not None and newer.kind is updated.kind:
        raise AlternationViolation("A correção deixaria dois registros do mesmo tipo em sequência")
    if older is not None and older.kind is updated.kind:
        raise AlternationViolation("A correção deixaria dois registros do mesmo tipo em sequência")
    if older is None and updated.kind is EventKind.OUT:
        raise AlternationViolation("O primeiro registro de um colaborador deve ser uma ENTRADA")


class CorrectionService:
    """Admin rewrite of an event's timestamp and kind.

    Photo, owner and coordinate are carried over unchanged.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        tz: Optional[ZoneInfo] = None,
        enforce_alternation: bool = True,
    ):
        self._attendance = attendance
        self._tz = tz
        self._enforce_alternation = bool(enforce_alternation)

    def records_for(self, context: SessionContext, user_id: str) -> list[AttendanceEvent]:
        context.require_admin()
        return list(self._attendance.list_by_user(user_id))

    def correct(
        self,
        context: SessionContext,
        event_id: str,
        *,
        day: date,
        clock: time,
        kind: EventKind,
    ) -> AttendanceEvent:
        actor = context.require_admin()

        current = self._attendance.get_by_id(event_id)
        if current is None:
            raise NotFound("Registro não encontrado")

        updated = replace(current, timestamp=compose_millis(day, clock, self._tz), kind=EventKind(kind))
        if self._enforce_alternation:
            check_alternation(self._attendance.list_by_user(current.user_id), updated)

        self._attendance.update_event(updated.event_id, timestamp=updated.timestamp, kind=updated.kind)
        _logger.info(
            "Event %s corrected by %s: %s@%d -> %s@%d",
            event_id,
            actor.user_id,
            current.kind.value,
            current.timestamp,
            updated.kind.value,
            updated.timestamp,
        )
        return updated


class UserRecordsView:
    """Admin view of one employee's records.

    A successful correction is patched into the held list and re-sorted
    locally; a failed one leaves the list exactly as it was.
    """

    def __init__(self, corrections: CorrectionService, context: SessionContext, user_id: str):
        self._corrections = corrections
        self._context = context
        self.user_id = user_id
        self._events: list[AttendanceEvent] = []

    @property
    def events(self) -> list[AttendanceEvent]:
        return list(self._events)

    def load(self) -> list[AttendanceEvent]:
        self._events = sort_desc(self._corrections.records_for(self._context, self.user_id))
        return self.events

    def apply(self, event_id: str, *, day: date, clock: time, kind: EventKind) -> AttendanceEvent:
        updated = self._corrections.correct(self._context, event_id, day=day, clock=clock, kind=kind)
        self._events = sort_desc([updated if e.event_id == updated.event_id else e for e in self._events])
        return updated
