from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import NotFound
from ..database.connection import DatabaseConnection
from ..database.decoding import require_enum, require_str
from ..database.mysql_base import fetchall, fetchone, read_cursor, write_cursor
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "id, username, password_hash, full_name, role"


def decode_user_row(row: Mapping[str, Any]) -> User:
    return User(
        user_id=require_str(row, "id"),
        username=require_str(row, "username"),
        full_name=require_str(row, "full_name"),
        role=require_enum(row, "role", Role),
        password_hash=require_str(row, "password_hash", allow_empty=True),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_user(self, *, username: str, password_hash: str, full_name: str, role: Role) -> User:
        user = User(
            user_id=str(uuid.uuid4()),
            username=username,
            full_name=full_name,
            role=role,
            password_hash=password_hash,
        )
        with write_cursor(self._conn_factory, action="insert_user") as (_, cur):
            cur.execute(
                """
                INSERT INTO app_users(id, username, password_hash, full_name, role)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user.user_id, user.username, user.password_hash, user.full_name, user.role.value),
            )
        return user

    def find_by_username(self, username: str) -> Optional[User]:
        with read_cursor(self._conn_factory, action="find_by_username") as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM app_users WHERE username=%s", (username,))
            row = fetchone(cur)
            return decode_user_row(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        with read_cursor(self._conn_factory, action="get_user") as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM app_users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return decode_user_row(row) if row else None

    def list_users(self) -> Sequence[User]:
        with read_cursor(self._conn_factory, action="list_users") as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM app_users ORDER BY full_name ASC")
            return [decode_user_row(r) for r in fetchall(cur)]

    def update_role(self, user_id: str, role: Role) -> None:
        with write_cursor(self._conn_factory, action="update_role") as (_, cur):
            cur.execute("UPDATE app_users SET role=%s WHERE id=%s", (role.value, user_id))
            if cur.rowcount == 0:
                raise NotFound("Usuário não encontrado")
