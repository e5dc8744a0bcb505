"""Daily challenge queries"""
import logging
from typing import Optional

import psycopg

from habit_engine.db.connection import Database
from habit_engine.exceptions import wrap_external_exception
from habit_engine.models import DailyChallenge

logger = logging.getLogger(__name__)


def _row_to_challenge(row: dict) -> DailyChallenge:
    return DailyChallenge(
        id=row["id"],
        target_repetitions=row["target_repetitions"],
        is_completed=row["is_completed"],
        date=row["challenge_date"],
    )


class PostgresChallengeRepository:
    """Daily challenge table. Holds at most one row after every replace."""

    def __init__(self, db: Database):
        self.db = db

    async def upsert(self, challenge: DailyChallenge) -> None:
        """Insert or update a challenge by id"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO daily_challenges (id, target_repetitions, is_completed, challenge_date)
                        VALUES (%s, %s, %s, %s)
                        ON CONFLICT (id) DO UPDATE
                        SET target_repetitions = EXCLUDED.target_repetitions,
                            is_completed = EXCLUDED.is_completed,
                            challenge_date = EXCLUDED.challenge_date
                        """,
                        (challenge.id, challenge.target_repetitions, challenge.is_completed, challenge.date)
                    )
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="upsert_challenge", context={"challenge_id": challenge.id})

    async def delete_all(self) -> None:
        """Delete every stored challenge"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("DELETE FROM daily_challenges")
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="delete_all_challenges")

    async def latest(self) -> Optional[DailyChallenge]:
        """Get the most recent challenge by date"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        SELECT id, target_repetitions, is_completed, challenge_date
                        FROM daily_challenges
                        ORDER BY challenge_date DESC
                        LIMIT 1
                        """
                    )
                    row = await cur.fetchone()
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="latest_challenge")

        return _row_to_challenge(row) if row else None

    async def replace(self, challenge: DailyChallenge) -> None:
        """
        Delete all challenges and insert the new one in a single transaction

        Readers never observe an empty table or two challenges for different days.
        """
        try:
            async with self.db.connection() as conn:
                async with conn.transaction():
                    async with conn.cursor() as cur:
                        await cur.execute("DELETE FROM daily_challenges")
                        await cur.execute(
                            """
                            INSERT INTO daily_challenges (id, target_repetitions, is_completed, challenge_date)
                            VALUES (%s, %s, %s, %s)
                            """,
                            (challenge.id, challenge.target_repetitions, challenge.is_completed, challenge.date)
                        )
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="replace_challenge", context={"challenge_id": challenge.id})

        logger.info(f"Replaced daily challenge: {challenge.target_repetitions} reps for {challenge.date}")
