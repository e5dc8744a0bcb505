"""Activity history queries"""
import logging

import psycopg

from habit_engine.db.connection import Database
from habit_engine.exceptions import wrap_external_exception
from habit_engine.models import ActivityRecord

logger = logging.getLogger(__name__)


class PostgresHistoryStore:
    """Activity log backed by the activity_records table"""

    def __init__(self, db: Database):
        self.db = db

    async def list_activity_records(self) -> list[ActivityRecord]:
        """
        Get every logged session, oldest first

        Returns:
            List of ActivityRecord
        """
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        SELECT activity_date, hour, repetitions, points
                        FROM activity_records
                        ORDER BY activity_date, id
                        """
                    )
                    rows = await cur.fetchall()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="list_activity_records")

        return [
            ActivityRecord(
                date=row["activity_date"],
                hour=row["hour"],
                repetitions=row["repetitions"],
                points=row["points"],
            )
            for row in rows
        ]

    async def append(self, record: ActivityRecord) -> None:
        """Append a finished session to the log"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO activity_records (activity_date, hour, repetitions, points)
                        VALUES (%s, %s, %s, %s)
                        """,
                        (record.date, record.hour, record.repetitions, record.points)
                    )
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="append_activity_record",
                context={"date": record.date.isoformat()}
            )

        logger.info(f"Logged {record.repetitions} reps ({record.points} pts) for {record.date}")
