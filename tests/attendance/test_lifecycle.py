from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.timeclock.timeclock.attendance.model import Coordinate
from src.timeclock.timeclock.attendance.service import AttendanceService, TimeClock, map_link, next_kind
from src.timeclock.timeclock.core.enums import EventKind
from src.timeclock.timeclock.core.exceptions import MissingEvidence, MissingLocation, StoreWriteFailure
from tests.helpers import PHOTO, InMemoryAttendance, make_event

HERE = Coordinate(-23.55052, -46.633308)


def _service(repo, now: datetime) -> AttendanceService:
    ids = iter(f"ev-{i}" for i in range(1, 100))
    return AttendanceService(repo, clock=lambda: int(now.timestamp() * 1000), id_factory=lambda: next(ids))


def test_next_kind_empty_history_is_in():
    assert next_kind([]) is EventKind.IN


@pytest.mark.parametrize(
    "latest, expected",
    [(EventKind.IN, EventKind.OUT), (EventKind.OUT, EventKind.IN)],
)
def test_next_kind_depends_only_on_latest(fixed_now, latest, expected):
    # Older events contradict each other on purpose; only history[0] matters.
    history = [
        make_event("c", at=fixed_now, kind=latest),
        make_event("b", at=fixed_now - timedelta(hours=1), kind=latest),
        make_event("a", at=fixed_now - timedelta(hours=2), kind=EventKind.OUT),
    ]
    assert next_kind(history) is expected


def test_commit_without_photo_is_rejected_and_store_untouched(fixed_now):
    repo = InMemoryAttendance()
    svc = _service(repo, fixed_now)

    with pytest.raises(MissingEvidence) as exc:
        svc.commit("u1", EventKind.IN, None, HERE)

    assert str(exc.value) == "Erro: Foto não encontrada."
    assert repo.events == {}


def test_missing_photo_is_reported_before_missing_location(fixed_now):
    svc = _service(InMemoryAttendance(), fixed_now)

    with pytest.raises(MissingEvidence):
        svc.commit("u1", EventKind.IN, "", None)


def test_commit_without_location_is_rejected(fixed_now):
    repo = InMemoryAttendance()
    svc = _service(repo, fixed_now)

    with pytest.raises(MissingLocation) as exc:
        svc.commit("u1", EventKind.IN, PHOTO, None)

    assert "GPS" in str(exc.value)
    assert repo.events == {}


def test_commit_appends_event_with_evidence(fixed_now):
    repo = InMemoryAttendance()
    svc = _service(repo, fixed_now)

    ev = svc.commit("u1", EventKind.IN, PHOTO, HERE)

    assert repo.events["ev-1"] == ev
    assert ev.timestamp == int(fixed_now.timestamp() * 1000)
    assert ev.photo == PHOTO
    assert ev.coordinate == HERE
    assert ev.kind is EventKind.IN


def test_clock_out_then_in_after_previous_out(fixed_now):
    t0 = fixed_now - timedelta(hours=10)
    repo = InMemoryAttendance([make_event("old", user_id="u1", at=t0, kind=EventKind.OUT)])
    clock = TimeClock(_service(repo, fixed_now), "u1")
    clock.load()

    assert clock.next_kind is EventKind.IN
    ev = clock.clock(PHOTO, HERE)

    assert ev.kind is EventKind.IN
    assert ev.timestamp > int(t0.timestamp() * 1000)
    assert [e.event_id for e in clock.history] == [ev.event_id, "old"]
    assert clock.next_kind is EventKind.OUT


def test_double_submit_creates_two_events(fixed_now):
    repo = InMemoryAttendance()
    svc = _service(repo, fixed_now)

    # Both requests saw the same (empty) history, so both commit IN.
    svc.commit("u1", next_kind([]), PHOTO, HERE)
    svc.commit("u1", next_kind([]), PHOTO, HERE)

    kinds = [e.kind for e in repo.list_by_user("u1")]
    assert kinds == [EventKind.IN, EventKind.IN]


def test_failed_write_leaves_clock_history_unchanged(fixed_now):
    repo = InMemoryAttendance([make_event("old", at=fixed_now - timedelta(hours=1), kind=EventKind.IN)])
    clock = TimeClock(_service(repo, fixed_now), "u1")
    clock.load()
    repo.fail_writes = True

    with pytest.raises(StoreWriteFailure):
        clock.clock(PHOTO, HERE)

    assert [e.event_id for e in clock.history] == ["old"]
    assert clock.next_kind is EventKind.OUT


def test_history_is_per_user(fixed_now):
    repo = InMemoryAttendance(
        [
            make_event("a", user_id="u1", at=fixed_now, kind=EventKind.IN),
            make_event("b", user_id="u2", at=fixed_now, kind=EventKind.IN),
        ]
    )
    svc = _service(repo, fixed_now)

    assert [e.event_id for e in svc.history("u1")] == ["a"]


def test_map_link_and_view(fixed_now):
    svc = _service(InMemoryAttendance(), fixed_now)
    ev = make_event("a", at=fixed_now, kind=EventKind.OUT, latitude=-23.5, longitude=-46.6)

    view = svc.to_view(ev)

    assert map_link(-23.5, -46.6) == "https://www.google.com/maps?q=-23.5,-46.6"
    assert view.map_link == "https://www.google.com/maps?q=-23.5,-46.6"
    assert view.label == "SAÍDA"
    assert view.photo is None
    assert svc.to_view(ev, with_photo=True).photo == PHOTO


class ReadsFailAfterInsert(InMemoryAttendance):
    def insert_event(self, event):
        super().insert_event(event)
        self.fail_reads = True


def test_commit_stands_when_history_refresh_fails(fixed_now):
    previous = make_event("old", user_id="u1", at=fixed_now - timedelta(hours=9), kind=EventKind.OUT)
    repo = ReadsFailAfterInsert([previous])
    clock = TimeClock(_service(repo, fixed_now), "u1")
    clock.load()

    ev = clock.clock(PHOTO, HERE)

    assert ev.kind is EventKind.IN
    assert set(repo.events) == {"old", ev.event_id}
    assert clock.stale
    assert [e.event_id for e in clock.history] == [ev.event_id, "old"]
    # The stored IN is reflected locally even though the re-read failed.
    assert clock.next_kind is EventKind.OUT

    repo.fail_reads = False
    clock.load()
    assert not clock.stale
