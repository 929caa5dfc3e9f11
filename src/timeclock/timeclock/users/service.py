from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import digits_only, normalize_login_identifier, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DuplicateHandleError, NotFound, ValidationError
from .model import User
from .repository import UserRepository
from .session import SessionContext, SessionUser

_logger = logging.getLogger(__name__)


class AuthService:
    """Use cases: login and self-registration."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, identifier: str, password: str) -> User:
        username = normalize_login_identifier(identifier)
        user = self._users.find_by_username(username) if username else None
        if not user:
            raise AuthenticationError("Usuário ou senha incorretos")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Usuário ou senha incorretos")

        _logger.info("User %s logged in", user.user_id)
        return user

    def register(self, *, username: str, password: str, full_name: str) -> User:
        if not (username or "").strip() or not (password or "") or not (full_name or "").strip():
            raise ValidationError("Preencha todos os campos")

        full_name = require_non_empty(full_name, "Nome")
        handle = digits_only(username)
        if not handle:
            raise ValidationError("CPF inválido")
        require_min_length(password, "Senha", MIN_PASSWORD_LENGTH)

        # The unique key on username is the real guard; this gives a clean message first.
        if self._users.find_by_username(handle):
            raise DuplicateHandleError("Este CPF/Usuário já está cadastrado")

        user = self._users.insert_user(
            username=handle,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=Role.EMPLOYEE,
        )
        _logger.info("Registered user %s", user.user_id)
        return user


class AdminRoster:
    """Admin view of the roster.

    Holds the listed users; a role toggle patches the list locally after
    the store confirms the write.
    """

    def __init__(self, users: UserRepository):
        self._users_repo = users
        self._users: list[User] = []

    @property
    def users(self) -> list[User]:
        return list(self._users)

    def refresh(self) -> list[User]:
        self._users = list(self._users_repo.list_users())
        return self.users

    def toggle_role(self, context: SessionContext, target_id: str) -> User:
        actor: SessionUser = context.require_admin()
        if actor.user_id == target_id:
            raise AuthorizationError("Você não pode alterar seu próprio nível de acesso.")

        target = self._find(target_id)
        new_role = target.role.toggled()
        self._users_repo.update_role(target.user_id, new_role)

        updated = User(
            user_id=target.user_id,
            username=target.username,
            full_name=target.full_name,
            role=new_role,
            password_hash=target.password_hash,
        )
        self._users = [updated if u.user_id == target_id else u for u in self._users]
        _logger.info("User %s role changed to %s by %s", target_id, new_role.value, actor.user_id)
        return updated

    def _find(self, user_id: str) -> User:
        for u in self._users:
            if u.user_id == user_id:
                return u
        user: Optional[User] = self._users_repo.get_by_id(user_id)
        if not user:
            raise NotFound("Usuário não encontrado")
        return user
