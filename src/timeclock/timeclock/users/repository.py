from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Roster side of the record store gateway.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def insert_user(self, *, username: str, password_hash: str, full_name: str, role: Role) -> User:
        """Raises DuplicateHandleError when `username` is taken."""
        raise NotImplementedError

    def find_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        """All users ordered by display name."""
        raise NotImplementedError

    def update_role(self, user_id: str, role: Role) -> None:
        """Raises StoreWriteFailure when the store rejects the write."""
        raise NotImplementedError
