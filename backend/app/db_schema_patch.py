from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Columns added after the first release of each table.
# (name, sqlite_type_and_default, postgres_type_and_default)
REQUIRED_GRID_SETTINGS_COLUMNS: List[Tuple[str, str, str]] = [
    ("column_names", "JSON DEFAULT NULL", "JSON DEFAULT NULL"),
]

REQUIRED_PRACTICE_SCHEDULE_COLUMNS: List[Tuple[str, str, str]] = [
    ("group_label", "TEXT DEFAULT NULL", "TEXT DEFAULT NULL"),
    ("is_external_group", "INTEGER DEFAULT 0", "BOOLEAN DEFAULT FALSE"),
]


def _is_sqlite(engine: Engine) -> bool:
    return engine.dialect.name.lower() == "sqlite"


def _table_exists(engine: Engine, table_name: str) -> bool:
    with engine.connect() as conn:
        if _is_sqlite(engine):
            result = conn.execute(
                text("SELECT name FROM sqlite_master WHERE type='table' AND name=:table_name"),
                {"table_name": table_name},
            ).fetchone()
            return bool(result)
        result = conn.execute(
            text("""
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = 'public' AND table_name = :table_name
            )
        """),
            {"table_name": table_name},
        ).fetchone()
        return bool(result and result[0])


def _get_existing_columns_sqlite(engine: Engine, table_name: str) -> Dict[str, str]:
    cols: Dict[str, str] = {}
    with engine.connect() as conn:
        res = conn.execute(text(f"PRAGMA table_info({table_name});")).fetchall()
        # PRAGMA table_info returns rows: (cid, name, type, notnull, dflt_value, pk)
        for row in res:
            cols[str(row[1])] = str(row[2])
    return cols


def _get_existing_columns_postgres(engine: Engine, table_name: str) -> Dict[str, str]:
    cols: Dict[str, str] = {}
    sql = """
    SELECT column_name, data_type
    FROM information_schema.columns
    WHERE table_schema = 'public' AND table_name = :table_name;
    """
    with engine.connect() as conn:
        res = conn.execute(text(sql), {"table_name": table_name}).fetchall()
        for row in res:
            cols[str(row[0])] = str(row[1])
    return cols


def _ensure_columns(engine: Engine, table: str, required: List[Tuple[str, str, str]]) -> List[str]:
    """Add any missing columns to `table`; returns the names that were added."""
    if not _table_exists(engine, table):
        # create_all will build it with every column
        return []

    sqlite = _is_sqlite(engine)
    existing = _get_existing_columns_sqlite(engine, table) if sqlite else _get_existing_columns_postgres(engine, table)
    added: List[str] = []
    with engine.begin() as conn:
        for name, sqlite_type, pg_type in required:
            if name in existing:
                continue
            if sqlite:
                # SQLite supports ADD COLUMN without IF NOT EXISTS
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {sqlite_type};"))
            else:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN IF NOT EXISTS {name} {pg_type};"))
            added.append(name)
    return added


def ensure_grid_settings_columns(engine: Engine) -> None:
    """
    Idempotently adds late columns to the 'rotation_grid_settings' table.
    Safe to run at every startup.
    """
    try:
        from app.models.rotation_grid_settings import RotationGridSettings

        added = _ensure_columns(engine, RotationGridSettings.__table__.name, REQUIRED_GRID_SETTINGS_COLUMNS)
        if added:
            logger.info("Added columns to rotation_grid_settings: %s", ", ".join(added))
    except Exception as e:
        # Log error but don't crash the server
        logger.warning(f"Failed to ensure grid settings columns: {e}")


def ensure_practice_schedule_columns(engine: Engine) -> None:
    """
    Idempotently adds late columns to the 'practice_schedule' table.
    Safe to run at every startup.
    """
    try:
        from app.models.practice_schedule import PracticeSchedule

        added = _ensure_columns(engine, PracticeSchedule.__table__.name, REQUIRED_PRACTICE_SCHEDULE_COLUMNS)
        if added:
            logger.info("Added columns to practice_schedule: %s", ", ".join(added))
    except Exception as e:
        logger.warning(f"Failed to ensure practice schedule columns: {e}")
