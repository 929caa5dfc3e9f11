from __future__ import annotations

import io
import logging
from datetime import date
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

import pandas as pd
from openpyxl.utils import get_column_letter

from ..attendance.repository import AttendanceRepository
from ..attendance.service import map_link
from ..common.datetime_utils import day_bounds_millis, from_millis
from ..core.constants import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIME_FORMAT,
    EXPORT_COLUMNS,
    EXPORT_FILENAME_TEMPLATE,
    EXPORT_SHEET_NAME,
    MAP_LINK_TEMPLATE,
    UNKNOWN_EMPLOYEE_HANDLE,
    UNKNOWN_EMPLOYEE_NAME,
)
from ..core.exceptions import EmptyRange, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import ExportArtifact, ExportRow

_logger = logging.getLogger(__name__)


class ReportService:
    """Date-range export of attendance events joined to the roster.

    The roster is read once, lazily, and kept for the lifetime of the
    service instance (no invalidation).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        tz: Optional[ZoneInfo] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        time_format: str = DEFAULT_TIME_FORMAT,
        map_link_template: str = MAP_LINK_TEMPLATE,
    ):
        self._attendance = attendance
        self._users = users
        self._tz = tz
        self._date_format = date_format
        self._time_format = time_format
        self._map_link_template = map_link_template
        self._roster: Optional[dict[str, User]] = None

    def roster(self) -> dict[str, User]:
        if self._roster is None:
            self._roster = {u.user_id: u for u in self._users.list_users()}
        return self._roster

    def build_rows(self, *, start: date, end: date) -> list[ExportRow]:
        if start > end:
            raise ValidationError("A data inicial deve ser anterior à data final")

        start_ms, end_ms = day_bounds_millis(start, end, self._tz)
        events = self._attendance.list_by_range(start_ms, end_ms)
        roster = self.roster()

        rows: list[ExportRow] = []
        for ev in events:
            user = roster.get(ev.user_id)
            when = from_millis(ev.timestamp, self._tz)
            rows.append(
                ExportRow(
                    full_name=user.full_name if user else UNKNOWN_EMPLOYEE_NAME,
                    username=user.username if user else UNKNOWN_EMPLOYEE_HANDLE,
                    date=when.strftime(self._date_format),
                    time=when.strftime(self._time_format),
                    kind_label=ev.kind.label,
                    latitude=ev.latitude,
                    longitude=ev.longitude,
                    map_link=map_link(ev.latitude, ev.longitude, self._map_link_template),
                )
            )
        return rows

    def export(self, *, start: date, end: date) -> ExportArtifact:
        rows = self.build_rows(start=start, end=end)
        if not rows:
            raise EmptyRange("Nenhum registro encontrado no período selecionado.")

        content = render_xlsx(rows)
        filename = EXPORT_FILENAME_TEMPLATE.format(start=start.isoformat(), end=end.isoformat())
        _logger.info("Exported %d rows for %s..%s", len(rows), start, end)
        return ExportArtifact(filename=filename, content=content, row_count=len(rows), start=start, end=end)


def render_xlsx(rows: Sequence[ExportRow]) -> bytes:
    """One-sheet workbook with the fixed column order and widths."""

    headers = [name for name, _ in EXPORT_COLUMNS]
    df = pd.DataFrame([r.as_tuple() for r in rows], columns=headers)

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=EXPORT_SHEET_NAME)
        sheet = writer.sheets[EXPORT_SHEET_NAME]
        for idx, (_, width) in enumerate(EXPORT_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width
    return out.getvalue()
