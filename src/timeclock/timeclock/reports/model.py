from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ExportRow:
    """One spreadsheet line, already localized for the operator."""

    full_name: str
    username: str
    date: str
    time: str
    kind_label: str
    latitude: float
    longitude: float
    map_link: str

    def as_tuple(self) -> tuple:
        return (
            self.full_name,
            self.username,
            self.date,
            self.time,
            self.kind_label,
            self.latitude,
            self.longitude,
            self.map_link,
        )


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    row_count: int
    start: date
    end: date

    mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
