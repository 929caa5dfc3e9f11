"""Explicit session context.

The authenticated identity is an object handed to whatever needs it; the
Flask cookie session only carries its serialized form. `login` and `logout`
are the only transitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import User

_SESSION_KEY = "timeclock_session"


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    username: str
    full_name: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(user_id=user.user_id, username=user.username, full_name=user.full_name, role=user.role)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class SessionContext:
    user: Optional[SessionUser] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role is Role.ADMIN

    def require_user(self) -> SessionUser:
        if self.user is None:
            raise AuthorizationError("Sessão expirada. Faça login novamente.")
        return self.user

    def require_admin(self) -> SessionUser:
        user = self.require_user()
        if user.role is not Role.ADMIN:
            raise AuthorizationError("Acesso restrito a administradores")
        return user


ANONYMOUS = SessionContext()


def login(context: SessionContext, user: User) -> SessionContext:
    """Transition: anonymous (or another user) -> `user`."""
    return SessionContext(user=SessionUser.from_user(user))


def logout(context: SessionContext) -> SessionContext:
    return ANONYMOUS


def load(store: Mapping[str, Any]) -> SessionContext:
    """Rebuild the context from a cookie session; tampered payloads are anonymous."""
    raw = store.get(_SESSION_KEY)
    if not isinstance(raw, Mapping):
        return ANONYMOUS
    try:
        return SessionContext(
            user=SessionUser(
                user_id=str(raw["user_id"]),
                username=str(raw["username"]),
                full_name=str(raw["full_name"]),
                role=Role(raw["role"]),
            )
        )
    except (KeyError, ValueError):
        return ANONYMOUS


def save(store: MutableMapping[str, Any], context: SessionContext) -> None:
    if context.user is None:
        store.pop(_SESSION_KEY, None)
    else:
        store[_SESSION_KEY] = context.user.to_dict()
