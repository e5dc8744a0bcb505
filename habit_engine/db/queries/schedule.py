"""Current restriction window queries"""
import logging
from typing import Optional

import psycopg

from habit_engine.db.connection import Database
from habit_engine.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class PostgresSchedulingWindowRepository:
    """Single-row table holding the start of the accepted restriction window"""

    def __init__(self, db: Database):
        self.db = db

    async def save_window(self, start_hour: int, start_minute: int) -> None:
        """Replace the stored window start"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO scheduling_windows (id, start_hour, start_minute)
                        VALUES (1, %s, %s)
                        ON CONFLICT (id) DO UPDATE
                        SET start_hour = EXCLUDED.start_hour,
                            start_minute = EXCLUDED.start_minute,
                            updated_at = CURRENT_TIMESTAMP
                        """,
                        (start_hour, start_minute)
                    )
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="save_window",
                context={"start_hour": start_hour, "start_minute": start_minute}
            )

    async def current_window(self) -> Optional[tuple[int, int]]:
        """Get (hour, minute) of the stored window, if any"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT start_hour, start_minute FROM scheduling_windows WHERE id = 1")
                    row = await cur.fetchone()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="current_window")

        return (row["start_hour"], row["start_minute"]) if row else None

    async def delete_window(self) -> None:
        """Delete the stored window"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("DELETE FROM scheduling_windows")
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="delete_window")
