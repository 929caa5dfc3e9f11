from __future__ import annotations

from typing import Optional

from .enums import LocationFailure


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFound(DomainError):
    """Raised when a referenced user or event does not exist."""


class DuplicateHandleError(ValidationError):
    """Raised when registering a login handle that is already taken."""


class MissingEvidence(ValidationError):
    """Commit attempted without an evidence image."""


class MissingLocation(ValidationError):
    """Commit attempted without a coordinate fix."""


class AlternationViolation(ValidationError):
    """A correction would place two events of the same kind next to each other."""


class EmptyRange(DomainError):
    """No attendance events in the requested export interval."""


class StoreFailure(DomainError):
    """The record store could not be reached or refused the statement."""


class StoreWriteFailure(StoreFailure):
    """The record store rejected a write. Prior state is left untouched."""


class StoreReadFailure(StoreFailure):
    """A query against the record store failed."""


class DecodeError(DomainError):
    """A stored row does not match the expected schema."""


class CaptureError(DomainError):
    """Base for camera capability failures (retry-eligible)."""


class PermissionDenied(CaptureError):
    """The operator (or the platform) refused camera access."""


class DeviceUnavailable(CaptureError):
    """No usable camera device."""


class LocationError(DomainError):
    """A coordinate fix could not be produced (retry-eligible)."""

    def __init__(self, reason: LocationFailure, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or _LOCATION_MESSAGES[reason])

    @property
    def unsupported(self) -> bool:
        return self.reason is LocationFailure.UNSUPPORTED


_LOCATION_MESSAGES = {
    LocationFailure.UNSUPPORTED: "Geolocalização não suportada",
    LocationFailure.PERMISSION_DENIED: "Ative o GPS para continuar",
    LocationFailure.TIMEOUT: "Tempo esgotado ao obter localização",
}
