from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import resolve_zone
from .core.constants import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_GEO_TIMEOUT_SECONDS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_TIME_FORMAT,
    DEFAULT_TIMEZONE,
    MAP_LINK_TEMPLATE,
)
from .corrections.service import CorrectionService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    correction_service: CorrectionService

    tz: Optional[ZoneInfo]
    geo_timeout_seconds: float
    jpeg_quality: int

    report_service_factory: Callable[[], ReportService] = field(repr=False)

    def report_service(self) -> ReportService:
        """A fresh export pipeline; its roster cache lives as long as the returned instance."""
        return self.report_service_factory()


def build_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    settings: Any = None,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""

    tz = resolve_zone(getattr(settings, "EXPORT_TIMEZONE", DEFAULT_TIMEZONE))
    link_template = getattr(settings, "MAP_LINK_TEMPLATE", MAP_LINK_TEMPLATE)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        attendance_service=AttendanceService(attendance_repo, map_link_template=link_template, tz=tz),
        correction_service=CorrectionService(
            attendance_repo,
            tz=tz,
            enforce_alternation=bool(getattr(settings, "ENFORCE_ALTERNATION", True)),
        ),
        tz=tz,
        geo_timeout_seconds=float(getattr(settings, "GEO_TIMEOUT_SECONDS", DEFAULT_GEO_TIMEOUT_SECONDS)),
        jpeg_quality=int(getattr(settings, "CAPTURE_JPEG_QUALITY", DEFAULT_JPEG_QUALITY)),
        report_service_factory=lambda: ReportService(
            attendance_repo,
            users_repo,
            tz=tz,
            date_format=getattr(settings, "EXPORT_DATE_FORMAT", DEFAULT_DATE_FORMAT),
            time_format=getattr(settings, "EXPORT_TIME_FORMAT", DEFAULT_TIME_FORMAT),
            map_link_template=link_template,
        ),
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings=settings,
    )
