from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.web import admin_required, current_context, error_response, fail, login_required, ok
from ..container import Container
from ..core.exceptions import DomainError
from . import session as session_ctx
from .service import AdminRoster

_logger = logging.getLogger(__name__)


def _user_json(user) -> dict:
    return {
        "user_id": user.user_id,
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role.value,
    }


def register(app: Flask, container: Container) -> None:
    def _start_session(user, *, remember: bool) -> None:
        ctx = session_ctx.login(current_context(), user)
        session.permanent = remember
        session_ctx.save(session, ctx)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        try:
            user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except DomainError as e:
            return error_response(e)
        except Exception:
            _logger.exception("Login failed unexpectedly")
            return fail("Erro ao fazer login", 500)

        _start_session(user, remember=bool(data.get("remember_me")))
        return ok(user=_user_json(user))

    @app.route("/api/register", methods=["POST"], endpoint="register")
    def register_user():
        data = request.get_json(silent=True) or request.form
        try:
            user = container.auth_service.register(
                username=data.get("username", ""),
                password=data.get("password", ""),
                full_name=data.get("full_name", ""),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            _logger.exception("Registration failed unexpectedly")
            return fail("Erro ao registrar", 500)

        # Auto-login after registration.
        _start_session(user, remember=False)
        return ok(user=_user_json(user)), 201

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session_ctx.save(session, session_ctx.logout(current_context()))
        session.clear()
        return ok()

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return ok(user=current_context().user.to_dict())

    @app.route("/api/admin/users", endpoint="admin_users")
    @admin_required
    def admin_users():
        roster = AdminRoster(container.users_repo)
        try:
            users = roster.refresh()
        except DomainError as e:
            return error_response(e)
        return ok(users=[_user_json(u) for u in users])

    @app.route("/api/admin/users/<user_id>/role", methods=["POST"], endpoint="toggle_role")
    @admin_required
    def toggle_role(user_id: str):
        roster = AdminRoster(container.users_repo)
        try:
            updated = roster.toggle_role(current_context(), user_id)
        except DomainError as e:
            return error_response(e)
        return ok(user=_user_json(updated))
