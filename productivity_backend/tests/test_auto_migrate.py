"""
Tests for auto_migrate.
"""
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from productivity_backend.auto_migrate import auto_migrate, build_add_column_sql
from productivity_backend.database import Base
from productivity_backend.models import DeepWorkSession


def make_engine():
    return create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)


class TestAutoMigrate:
    """Tests for adding missing columns"""

    def test_up_to_date_schema(self, engine):
        assert auto_migrate(engine, Base.metadata) == 0

    def test_adds_missing_columns(self):
        engine = make_engine()
        with engine.begin() as conn:
            conn.execute(text(
                "CREATE TABLE deep_work_sessions (id INTEGER PRIMARY KEY, task TEXT NOT NULL)"
            ))

        added = auto_migrate(engine, DeepWorkSession.metadata)

        columns = {col["name"] for col in inspect(engine).get_columns("deep_work_sessions")}
        assert {"completed_date", "last_observed_at", "time_left"} <= columns
        assert added == len(DeepWorkSession.__table__.columns) - 2

    def test_existing_rows_get_defaults(self):
        engine = make_engine()
        with engine.begin() as conn:
            conn.execute(text(
                "CREATE TABLE deep_work_sessions (id INTEGER PRIMARY KEY, task TEXT NOT NULL)"
            ))
            conn.execute(text("INSERT INTO deep_work_sessions (task) VALUES ('old')"))

        auto_migrate(engine, DeepWorkSession.metadata)

        with engine.connect() as conn:
            row = conn.execute(text("SELECT duration, is_active FROM deep_work_sessions")).one()
        assert row == (3600, 0)

    def test_add_column_sql(self):
        column = DeepWorkSession.__table__.columns["session_output"]

        assert build_add_column_sql("deep_work_sessions", column) == (
            "ALTER TABLE deep_work_sessions ADD COLUMN session_output TEXT DEFAULT ''"
        )
