from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import from_millis, now_millis
from ..core.constants import MAP_LINK_TEMPLATE
from ..core.enums import EventKind
from ..core.exceptions import DecodeError, MissingEvidence, MissingLocation, StoreFailure
from .model import AttendanceEvent, Coordinate, EventView
from .repository import AttendanceRepository

_logger = logging.getLogger(__name__)


def next_kind(history: Sequence[AttendanceEvent]) -> EventKind:
    """Kind the next event must have, given history ordered newest first.

    Only the most recent event is consulted; the full sequence is not
    re-validated here.
    """

    if not history or history[0].kind is EventKind.OUT:
        return EventKind.IN
    return EventKind.OUT


def map_link(latitude: float, longitude: float, template: str = MAP_LINK_TEMPLATE) -> str:
    return template.format(latitude=latitude, longitude=longitude)


class AttendanceService:
    """Lifecycle engine: gates commits on evidence and appends events."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], int] = now_millis,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        map_link_template: str = MAP_LINK_TEMPLATE,
        tz: Optional[ZoneInfo] = None,
    ):
        self._attendance = attendance
        self._clock = clock
        self._id_factory = id_factory
        self._map_link_template = map_link_template
        self._tz = tz

    def history(self, user_id: str) -> list[AttendanceEvent]:
        return list(self._attendance.list_by_user(user_id))

    def commit(
        self,
        user_id: str,
        kind: EventKind,
        image: Optional[str],
        coordinate: Optional[Coordinate],
    ) -> AttendanceEvent:
        """Append a new event. Not idempotent: every call creates a new event."""

        if not image:
            raise MissingEvidence("Erro: Foto não encontrada.")
        if coordinate is None:
            raise MissingLocation("Erro: Localização necessária. Verifique seu GPS.")

        event = AttendanceEvent(
            event_id=self._id_factory(),
            user_id=user_id,
            timestamp=int(self._clock()),
            kind=EventKind(kind),
            photo=image,
            latitude=float(coordinate.latitude),
            longitude=float(coordinate.longitude),
        )
        self._attendance.insert_event(event)
        _logger.info("Committed %s event %s for user %s", event.kind.value, event.event_id, user_id)
        return event

    def to_view(self, event: AttendanceEvent, *, with_photo: bool = False) -> EventView:
        return EventView.build(
            event,
            when=from_millis(event.timestamp, self._tz),
            map_link=map_link(event.latitude, event.longitude, self._map_link_template),
            with_photo=with_photo,
        )


class TimeClock:
    """One employee's clock: cached history plus the next permitted action.

    After every commit the cache is re-read from the store instead of being
    merged locally. If that re-read fails the commit still stands: the new
    event is put in front of the old cache and `stale` is set until the
    next successful `load`.
    """

    def __init__(self, service: AttendanceService, user_id: str):
        self._service = service
        self._user_id = user_id
        self._history: list[AttendanceEvent] = []
        self.stale = False

    @property
    def history(self) -> list[AttendanceEvent]:
        return list(self._history)

    @property
    def next_kind(self) -> EventKind:
        return next_kind(self._history)

    def load(self) -> list[AttendanceEvent]:
        self._history = self._service.history(self._user_id)
        self.stale = False
        return self.history

    def clock(self, image: Optional[str], coordinate: Optional[Coordinate]) -> AttendanceEvent:
        event = self._service.commit(self._user_id, self.next_kind, image, coordinate)
        try:
            self.load()
        except (StoreFailure, DecodeError):
            _logger.exception("History refresh failed after committing event %s", event.event_id)
            self._history = [event] + self._history
            self.stale = True
        return event
