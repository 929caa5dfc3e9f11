from __future__ import annotations

import re

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} inválido")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name}: mínimo de {min_len} caracteres")
    return value


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def normalize_login_identifier(value: str) -> str:
    """Strip CPF punctuation when the operator typed a formatted number."""
    value = (value or "").strip()
    if "." in value or "-" in value:
        return digits_only(value)
    return value


def require_coordinate(latitude, longitude) -> tuple[float, float]:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Coordenadas inválidas")

    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ValidationError("Coordenadas fora do intervalo")
    return lat, lon
