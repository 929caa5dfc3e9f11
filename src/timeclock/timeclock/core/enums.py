from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"

    def toggled(self) -> "Role":
        return Role.EMPLOYEE if self is Role.ADMIN else Role.ADMIN


class EventKind(str, Enum):
    """Attendance event discriminator stored in `time_records.type`."""

    IN = "IN"
    OUT = "OUT"

    @property
    def label(self) -> str:
        return "ENTRADA" if self is EventKind.IN else "SAÍDA"


class CaptureState(str, Enum):
    """Evidence capture lifecycle."""

    ACQUIRING = "ACQUIRING"
    LIVE = "LIVE"
    READY = "READY"
    FROZEN = "FROZEN"
    ERROR = "ERROR"


class LocationFailure(str, Enum):
    """Why a coordinate fix could not be produced."""

    UNSUPPORTED = "UNSUPPORTED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    TIMEOUT = "TIMEOUT"
