# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: SQL schema for the relational backend.

Timestamps are stored as fixed-width UTC ISO-8601 TEXT (see
core.timeutil.to_db_timestamp) and JSON payloads as TEXT, so the same DDL
runs on PostgreSQL and SQLite.
"""

from sqlalchemy import text
from sqlalchemy.engine import Engine

from selection_service.core.logging import get_logger

logger = get_logger(__name__)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS stables (
        id TEXT PRIMARY KEY,
        organization_id TEXT,
        owner_id TEXT,
        memory_horizon_days INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id TEXT PRIMARY KEY,
        first_name TEXT,
        last_name TEXT,
        email TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS organization_members (
        user_id TEXT NOT NULL,
        organization_id TEXT NOT NULL,
        first_name TEXT,
        last_name TEXT,
        user_email TEXT,
        status TEXT NOT NULL DEFAULT 'active',
        stable_access TEXT NOT NULL DEFAULT 'all',
        assigned_stable_ids TEXT NOT NULL DEFAULT '[]',
        PRIMARY KEY (user_id, organization_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS routine_instances (
        id TEXT PRIMARY KEY,
        stable_id TEXT NOT NULL,
        scheduled_date TEXT NOT NULL,
        points_value REAL NOT NULL DEFAULT 0,
        points_awarded REAL,
        assignment_type TEXT NOT NULL DEFAULT 'unassigned',
        status TEXT NOT NULL DEFAULT 'scheduled',
        completed_by TEXT,
        completed_at TEXT
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_routine_instances_stable_date
        ON routine_instances (stable_id, scheduled_date)
    """,
    """
    CREATE TABLE IF NOT EXISTS selection_entries (
        id TEXT PRIMARY KEY,
        process_id TEXT NOT NULL,
        selected_by TEXT NOT NULL,
        selected_by_name TEXT,
        routine_instance_id TEXT,
        points_value REAL NOT NULL DEFAULT 0,
        selected_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS selection_process_history (
        id TEXT PRIMARY KEY,
        process_id TEXT NOT NULL,
        process_name TEXT NOT NULL,
        organization_id TEXT NOT NULL,
        stable_id TEXT NOT NULL,
        algorithm TEXT NOT NULL,
        final_turn_order TEXT NOT NULL,
        completed_at TEXT NOT NULL,
        seq INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_history_stable_completed
        ON selection_process_history (stable_id, completed_at, seq)
    """,
)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they do not exist yet."""
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.execute(text(statement))
    logger.info("Database schema ensured (%d statements)", len(SCHEMA_STATEMENTS))
