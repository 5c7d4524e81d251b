from datetime import datetime

from workforce_attendance.attendance.model import Punch
from workforce_attendance.attendance.mysql_attendance_repository import punches_from_json, punches_to_json
from workforce_attendance.core.enums import PunchType
from workforce_attendance.database.bootstrap import SCHEMA_PATH, iter_sql_statements, strip_create_db_and_use


def test_punch_log_json_keeps_order_and_optional_fields():
    punches = (
        Punch(PunchType.IN, datetime(2024, 6, 1, 9, 0), note="gate", location="HQ"),
        Punch(PunchType.OUT, datetime(2024, 6, 1, 17, 0)),
    )

    assert punches_from_json(punches_to_json(punches).encode("utf-8")) == punches
    assert punches_from_json(None) == ()


def test_sql_splitter_handles_quotes_and_comments():
    sql = "CREATE DATABASE x;\nUSE x;\n-- note; ignored\nINSERT INTO t VALUES ('a;b');\nSELECT 1"

    statements = list(iter_sql_statements(strip_create_db_and_use(sql)))

    assert statements == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_schema_file_has_both_tables():
    statements = list(iter_sql_statements(SCHEMA_PATH.read_text(encoding="utf-8")))

    assert len(statements) == 2
    assert "attendance_records" in statements[1]
    assert "uq_attendance_employee_date" in statements[1]
