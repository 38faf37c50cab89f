from src.hostel_attendance.hostel_attendance.database.bootstrap import (
    DEFAULT_SCHEMA_PATH,
    _strip_create_db_and_use,
    iter_sql_statements,
)


def test_schema_splits_into_create_table_statements():
    sql = _strip_create_db_and_use(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8"))

    statements = list(iter_sql_statements(sql))

    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    tables = [s.split()[5] for s in statements]
    assert tables == [
        "students",
        "student_financials",
        "staff",
        "attendance_records",
        "checkout_rules",
        "checkout_financials",
    ]


def test_semicolons_inside_quotes_do_not_split():
    sql = "INSERT INTO t VALUES ('a;b');\n-- comment;\nSELECT \"x;y\";"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", 'SELECT "x;y"']
