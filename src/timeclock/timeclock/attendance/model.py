from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EventKind


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one clock-in or clock-out.

    `timestamp` is epoch milliseconds; `photo` is the evidence still as a
    `data:image/jpeg;base64,...` URL.
    """

    event_id: str
    user_id: str
    timestamp: int
    kind: EventKind
    photo: str
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class EventView:
    """Read-model for history lists (API / dashboard)."""

    event_id: str
    timestamp: int
    when: str
    kind: str
    label: str
    latitude: float
    longitude: float
    map_link: str
    photo: Optional[str] = None

    @classmethod
    def build(cls, event: AttendanceEvent, *, when: datetime, map_link: str, with_photo: bool) -> "EventView":
        return cls(
            event_id=event.event_id,
            timestamp=event.timestamp,
            when=when.strftime("%d/%m/%Y %H:%M:%S"),
            kind=event.kind.value,
            label=event.kind.label,
            latitude=event.latitude,
            longitude=event.longitude,
            map_link=map_link,
            photo=event.photo if with_photo else None,
        )
