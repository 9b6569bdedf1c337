"""
Tests for the Alembic migration environment.

Migrations are rendered in offline mode (the equivalent of
`alembic upgrade head --sql`), so no database is touched. The Config is
built without alembic.ini to leave the test run's logging alone.
"""

import io
from pathlib import Path

from alembic import command
from alembic.config import Config

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"


def render_upgrade_sql() -> str:
    buffer = io.StringIO()
    config = Config(output_buffer=buffer)
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    command.upgrade(config, "head", sql=True)
    return buffer.getvalue()


class TestInitialMigration:
    def test_creates_all_tables(self):
        sql = render_upgrade_sql()

        for table in ("users", "books", "reviews"):
            assert f"CREATE TABLE {table}" in sql

    def test_review_constraints(self):
        sql = render_upgrade_sql()

        assert "uq_review_book_user" in sql
        assert "ck_review_rating_range" in sql

    def test_reviews_book_id_has_no_foreign_key(self):
        sql = render_upgrade_sql()
        reviews_ddl = sql.split("CREATE TABLE reviews", 1)[1].split(";", 1)[0]

        assert "REFERENCES users" in reviews_ddl
        assert "REFERENCES books" not in reviews_ddl
