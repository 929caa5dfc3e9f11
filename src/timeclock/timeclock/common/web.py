from __future__ import annotations

from functools import wraps

from flask import g, jsonify, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DecodeError,
    DomainError,
    EmptyRange,
    NotFound,
    StoreFailure,
    ValidationError,
)
from ..users import session as session_ctx


def current_context() -> session_ctx.SessionContext:
    if "ctx" not in g:
        g.ctx = session_ctx.load(session)
    return g.ctx


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def ok(**payload):
    body = {"success": True}
    body.update(payload)
    return jsonify(body)


def error_response(e: DomainError):
    if isinstance(e, AuthenticationError):
        return fail(str(e), 401)
    if isinstance(e, AuthorizationError):
        return fail(str(e), 403)
    if isinstance(e, NotFound):
        return fail(str(e), 404)
    if isinstance(e, EmptyRange):
        return fail(str(e), 404, notice=True)
    if isinstance(e, ValidationError):
        return fail(str(e), 400)
    if isinstance(e, (StoreFailure, DecodeError)):
        return fail(str(e), 503)
    return fail(str(e), 400)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_context().is_authenticated:
            return fail("Sessão expirada. Faça login novamente.", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        ctx = current_context()
        if not ctx.is_authenticated:
            return fail("Sessão expirada. Faça login novamente.", 401)
        if not ctx.is_admin:
            return fail("Acesso restrito a administradores", 403)
        return view(*args, **kwargs)

    return wrapper
