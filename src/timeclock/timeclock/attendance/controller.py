from __future__ import annotations

import logging
from dataclasses import asdict

from flask import Flask, request

from ..capture.evidence import capture_still
from ..capture.provider import UploadedStillProvider
from ..common.web import current_context, error_response, fail, login_required, ok
from ..container import Container
from ..core.exceptions import DomainError, LocationError
from ..geolocation.probe import GeolocationProbe
from ..geolocation.providers import SubmittedPositionProvider
from .service import TimeClock

_logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _clock_for(user_id: str) -> TimeClock:
        clock = TimeClock(container.attendance_service, user_id)
        clock.load()
        return clock

    def _history_payload(clock: TimeClock) -> dict:
        svc = container.attendance_service
        return {
            "next_kind": clock.next_kind.value,
            "next_label": clock.next_kind.label,
            "history_stale": clock.stale,
            "history": [asdict(svc.to_view(e, with_photo=True)) for e in clock.history],
        }

    @app.route("/api/attendance", endpoint="attendance_history")
    @login_required
    def history():
        user = current_context().require_user()
        try:
            clock = _clock_for(user.user_id)
        except DomainError as e:
            return error_response(e)
        return ok(**_history_payload(clock))

    @app.route("/api/attendance/clock", methods=["POST"], endpoint="attendance_clock")
    @login_required
    def clock_event():
        user = current_context().require_user()
        data = request.get_json(silent=True) or request.form

        # Re-encode the browser still server-side; an unreadable upload counts as no photo.
        still = capture_still(UploadedStillProvider(data.get("image")), quality=container.jpeg_quality)

        probe = GeolocationProbe(SubmittedPositionProvider(data), timeout=container.geo_timeout_seconds)
        coordinate = probe.coordinate_or_none()

        try:
            clock = _clock_for(user.user_id)
            event = clock.clock(still, coordinate)
        except DomainError as e:
            if coordinate is None and isinstance(probe.error, LocationError):
                _, status = error_response(e)
                return fail(str(e), status, location_error=probe.error.reason.value, detail=str(probe.error))
            return error_response(e)
        except Exception:
            _logger.exception("Clock event failed for user %s", user.user_id)
            return fail("Erro ao registrar ponto.", 500)

        view = container.attendance_service.to_view(event)
        return ok(
            message=f"Ponto registrado: {event.kind.label}",
            event=asdict(view),
            **_history_payload(clock),
        ), 201
