from __future__ import annotations

from src.timeclock.timeclock.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from src.timeclock.timeclock.main import SCHEMA_PATH


def test_schema_file_splits_into_table_statements():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))

    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 2
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS app_users")
    assert statements[1].startswith("CREATE TABLE IF NOT EXISTS time_records")


def test_semicolon_inside_quotes_does_not_split():
    sql = "-- seed\nINSERT INTO t VALUES ('a;b');\nSELECT \"x;y\";"

    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", 'SELECT "x;y"']
