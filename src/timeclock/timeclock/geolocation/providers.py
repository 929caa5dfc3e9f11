from __future__ import annotations

from typing import Any, Mapping

from ..common.validators import require_coordinate
from ..core.enums import LocationFailure
from ..core.exceptions import LocationError, ValidationError

# Error codes reported by the browser Geolocation API (PositionError.code).
_BROWSER_ERROR_CODES = {
    "1": LocationFailure.PERMISSION_DENIED,
    "2": LocationFailure.UNSUPPORTED,
    "3": LocationFailure.TIMEOUT,
    "permission_denied": LocationFailure.PERMISSION_DENIED,
    "denied": LocationFailure.PERMISSION_DENIED,
    "unsupported": LocationFailure.UNSUPPORTED,
    "unavailable": LocationFailure.UNSUPPORTED,
    "timeout": LocationFailure.TIMEOUT,
}


class SubmittedPositionProvider:
    """Position reported by the client alongside the clock request.

    The browser already ran `getCurrentPosition`; this turns its outcome
    (coordinates or an error code) into a fix or a LocationError.
    """

    def __init__(self, payload: Mapping[str, Any]):
        self._payload = payload

    def current_position(self, *, high_accuracy: bool, timeout: float) -> tuple[float, float]:
        error_code = self._payload.get("location_error")
        if error_code not in (None, ""):
            reason = _BROWSER_ERROR_CODES.get(str(error_code).strip().lower(), LocationFailure.PERMISSION_DENIED)
            raise LocationError(reason)

        latitude = self._payload.get("latitude")
        longitude = self._payload.get("longitude")
        if latitude in (None, "") or longitude in (None, ""):
            raise LocationError(LocationFailure.UNSUPPORTED)

        try:
            return require_coordinate(latitude, longitude)
        except ValidationError as e:
            raise LocationError(LocationFailure.UNSUPPORTED, str(e)) from e
