from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account on the time clock.

    `username` is the login handle (a CPF, digits only, in practice).
    """

    user_id: str
    username: str
    full_name: str
    role: Role
    password_hash: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
