"""Database schema"""
import logging

from habit_engine.db.connection import Database

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS activity_records (
    id BIGSERIAL PRIMARY KEY,
    activity_date DATE NOT NULL,
    hour SMALLINT NOT NULL CHECK (hour BETWEEN 0 AND 23),
    repetitions INTEGER NOT NULL CHECK (repetitions >= 0),
    points INTEGER NOT NULL CHECK (points >= 0),
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS daily_challenges (
    id TEXT PRIMARY KEY,
    target_repetitions INTEGER NOT NULL CHECK (target_repetitions >= 0),
    is_completed BOOLEAN NOT NULL DEFAULT FALSE,
    challenge_date DATE NOT NULL
);

CREATE TABLE IF NOT EXISTS scheduling_windows (
    id SMALLINT PRIMARY KEY DEFAULT 1 CHECK (id = 1),
    start_hour SMALLINT NOT NULL CHECK (start_hour BETWEEN 0 AND 23),
    start_minute SMALLINT NOT NULL CHECK (start_minute BETWEEN 0 AND 59),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


async def create_schema(db: Database) -> None:
    """Create tables if they do not exist"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(SCHEMA_SQL)
        await conn.commit()
    logger.info("Database schema ready")
