from __future__ import annotations

import pytest

from crewledger import db
from crewledger.db import SCHEMA_STATEMENTS, TOUCH_UPDATED_AT_FUNCTION, TRIGGER_STATEMENTS, VERSIONED_TABLES


def test_versioned_tables_carry_updated_at():
    for table in VERSIONED_TABLES:
        definition = next(statement for statement in SCHEMA_STATEMENTS if f"crewledger.{table} (" in statement)
        assert "updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()" in definition


@pytest.mark.parametrize("table", VERSIONED_TABLES)
def test_updates_bump_updated_at(table):
    create = f"CREATE TRIGGER trg_{table}_touch_updated_at BEFORE UPDATE ON crewledger.{table} "
    matching = [statement for statement in TRIGGER_STATEMENTS if statement.startswith(create)]
    assert len(matching) == 1
    assert matching[0].endswith("FOR EACH ROW EXECUTE FUNCTION crewledger.touch_updated_at()")
    # dropped first so re-running the schema setup stays idempotent
    drop = f"DROP TRIGGER IF EXISTS trg_{table}_touch_updated_at ON crewledger.{table}"
    assert TRIGGER_STATEMENTS.index(drop) < TRIGGER_STATEMENTS.index(matching[0])


def test_touch_function_is_created_before_triggers():
    assert TRIGGER_STATEMENTS[0] is TOUCH_UPDATED_AT_FUNCTION
    assert "NEW.updated_at = clock_timestamp();" in TOUCH_UPDATED_AT_FUNCTION


class _RecordingCursor:
    def __init__(self, statements):
        self.statements = statements

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, statement, params=None):
        self.statements.append(statement)


class _RecordingConnection:
    def __init__(self):
        self.statements = []
        self.committed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self, **kwargs):
        return _RecordingCursor(self.statements)

    def commit(self):
        self.committed = True


class _RecordingPool:
    def __init__(self):
        self.conn = _RecordingConnection()

    def connection(self):
        return self.conn


def test_ensure_schema_installs_triggers_after_tables(monkeypatch):
    fake = _RecordingPool()
    monkeypatch.setattr(db, "pool", fake)

    db.ensure_schema()

    statements = fake.conn.statements
    assert fake.conn.committed
    assert statements[-len(TRIGGER_STATEMENTS):] == list(TRIGGER_STATEMENTS)
    last_table = max(statements.index(statement) for statement in SCHEMA_STATEMENTS)
    assert last_table < statements.index(TOUCH_UPDATED_AT_FUNCTION)
