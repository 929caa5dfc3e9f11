from __future__ import annotations

from datetime import datetime

import pytest

from src.timeclock.timeclock.core.enums import Role
from tests.helpers import UTC, InMemoryAttendance, InMemoryUsers, make_user


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 10, 8, 0, tzinfo=UTC)


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user("admin-1", username="11122233344", full_name="Ana Admin", role=Role.ADMIN),
            make_user("emp-1", username="55566677788", full_name="Bruno Silva"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()
