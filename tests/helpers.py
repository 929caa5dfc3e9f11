from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from src.timeclock.timeclock.attendance.model import AttendanceEvent
from src.timeclock.timeclock.core.enums import EventKind, Role
from src.timeclock.timeclock.core.exceptions import DuplicateHandleError, NotFound, StoreReadFailure, StoreWriteFailure
from src.timeclock.timeclock.users.model import User

UTC = timezone.utc
PHOTO = "data:image/jpeg;base64,/9j/AAAA"


class InMemoryUsers:
    def __init__(self, users=()):
        self.users_by_id: dict[str, User] = {u.user_id: u for u in users}
        self.fail_writes = False
        self.list_calls = 0
        self._seq = 0

    def insert_user(self, *, username: str, password_hash: str, full_name: str, role: Role) -> User:
        if any(u.username == username for u in self.users_by_id.values()):
            raise DuplicateHandleError("Este CPF/Usuário já está cadastrado")
        self._seq += 1
        user = User(
            user_id=f"u-{self._seq}",
            username=username,
            full_name=full_name,
            role=role,
            password_hash=password_hash,
        )
        self.users_by_id[user.user_id] = user
        return user

    def find_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.username == username), None)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def list_users(self):
        self.list_calls += 1
        return sorted(self.users_by_id.values(), key=lambda u: u.full_name)

    def update_role(self, user_id: str, role: Role) -> None:
        if self.fail_writes:
            raise StoreWriteFailure("Falha ao gravar (update_role)")
        user = self.users_by_id.get(user_id)
        if not user:
            raise NotFound("Usuário não encontrado")
        self.users_by_id[user_id] = User(user.user_id, user.username, user.full_name, role, user.password_hash)


class InMemoryAttendance:
    def __init__(self, events=()):
        self.events: dict[str, AttendanceEvent] = {e.event_id: e for e in events}
        self.fail_writes = False
        self.fail_reads = False

    def insert_event(self, event: AttendanceEvent) -> None:
        if self.fail_writes:
            raise StoreWriteFailure("Falha ao gravar (insert_event)")
        self.events[event.event_id] = event

    def update_event(self, event_id: str, *, timestamp: int, kind: EventKind) -> None:
        if self.fail_writes:
            raise StoreWriteFailure("Falha ao gravar (update_event)")
        ev = self.events.get(event_id)
        if ev is None:
            raise NotFound("Registro não encontrado")
        self.events[event_id] = AttendanceEvent(
            ev.event_id, ev.user_id, timestamp, kind, ev.photo, ev.latitude, ev.longitude
        )

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        return self.events.get(event_id)

    def list_by_user(self, user_id: str):
        if self.fail_reads:
            raise StoreReadFailure("Não foi possível carregar os registros. Tente novamente.")
        items = [e for e in self.events.values() if e.user_id == user_id]
        return sorted(items, key=lambda e: e.timestamp, reverse=True)

    def list_by_range(self, start_millis: int, end_millis: int):
        if self.fail_reads:
            raise StoreReadFailure("Não foi possível carregar os registros. Tente novamente.")
        items = [e for e in self.events.values() if start_millis <= e.timestamp <= end_millis]
        return sorted(items, key=lambda e: e.timestamp, reverse=True)


def make_user(user_id: str, *, username: str = "", full_name: str = "", role: Role = Role.EMPLOYEE) -> User:
    return User(
        user_id=user_id,
        username=username or f"{user_id}-cpf",
        full_name=full_name or user_id.upper(),
        role=role,
    )


def make_event(event_id: str, *, user_id: str = "u1", at: datetime, kind: EventKind,
               latitude: float = -23.5, longitude: float = -46.6) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=event_id,
        user_id=user_id,
        timestamp=int(at.timestamp() * 1000),
        kind=kind,
        photo=PHOTO,
        latitude=latitude,
        longitude=longitude,
    )
