from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.web import admin_required, current_context, error_response, fail, ok
from ..container import Container
from ..core.enums import EventKind
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/admin/users/<user_id>/records", endpoint="admin_user_records")
    @admin_required
    def user_records(user_id: str):
        try:
            events = container.correction_service.records_for(current_context(), user_id)
        except DomainError as e:
            return error_response(e)
        return ok(records=[asdict(svc.to_view(ev, with_photo=True)) for ev in events])

    @app.route("/api/admin/records/<event_id>", methods=["POST"], endpoint="admin_correct_record")
    @admin_required
    def correct_record(event_id: str):
        data = request.get_json(silent=True) or request.form
        try:
            day = parse_iso_date(str(data.get("date", "")).strip())
            clock = parse_clock_time(str(data.get("time", "")).strip())
            kind = EventKind(str(data.get("kind", "")).strip().upper())
        except ValueError:
            return fail("Data, hora ou tipo inválidos", 400)

        try:
            updated = container.correction_service.correct(current_context(), event_id, day=day, clock=clock, kind=kind)
        except DomainError as e:
            return error_response(e)
        return ok(message="Registro atualizado com sucesso!", record=asdict(svc.to_view(updated)))
