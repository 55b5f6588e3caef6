"""
Database utilities for the timetable catalog in PostgreSQL.
"""

import logging

import psycopg

logger = logging.getLogger(__name__)

SESSION_COLUMNS = (
    "id",
    "name",
    "code",
    "club_code",
    "description",
    "duration_minutes",
    "start_at",
    "end_at",
    "is_virtual",
)


def ensure_schema(conn: psycopg.Connection):
    """Create tables if they don't exist."""
    with conn.cursor() as cur:
        cur.execute("""
        CREATE TABLE IF NOT EXISTS classes (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            code TEXT NOT NULL,
            club_code TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            duration_minutes INTEGER NOT NULL,
            start_at TIMESTAMPTZ NOT NULL,
            end_at TIMESTAMPTZ NOT NULL,
            is_virtual BOOLEAN NOT NULL,
            CHECK (end_at > start_at)
        );
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS class_types (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        );
        """)

        cur.execute("CREATE INDEX IF NOT EXISTS ix_classes_start ON classes(start_at);")
        cur.execute("CREATE INDEX IF NOT EXISTS ix_classes_club_start ON classes(club_code, start_at);")


def check_connection(database_url: str) -> bool:
    """Test the database connection."""
    try:
        with psycopg.connect(database_url) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                result = cur.fetchone()
                return bool(result and result[0] == 1)
    except psycopg.Error as e:
        logger.error("Database connection failed: %s", e)
        return False
