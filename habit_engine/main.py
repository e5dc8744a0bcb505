"""Main entry point for the habit engine daily refresh"""
import argparse
import asyncio
import logging

from habit_engine.config import DEFAULT_WINDOW, LOG_LEVEL, parse_window, validate_config
from habit_engine.db.connection import Database
from habit_engine.db.schema import create_schema
from habit_engine.services.container import (
    ServiceContainer,
    build_in_memory_container,
    build_postgres_container,
)

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


async def daily_refresh(container: ServiceContainer, window: str = DEFAULT_WINDOW) -> dict:
    """
    Run the once-a-day engine cycle: close yesterday's challenge, size
    today's, reschedule notifications and the restriction window.

    Returns:
        Summary of the cycle for the host
    """
    # Reject a malformed window before anything is written
    start_hour, start_minute, end_hour, end_minute = parse_window(window)

    finished = await container.challenge_engine.rollover()
    if finished:
        logger.info(f"Yesterday's challenge was completed ({finished.target_repetitions} reps)")

    challenge = await container.challenge_engine.get_daily_challenge()
    hours = await container.notification_scheduler.reschedule()

    state = await container.restriction_controller.schedule(start_hour, start_minute, end_hour, end_minute)

    level = await container.reward_calculator.level_info()
    best_hour = await container.predictor.predict_best_hour()

    return {
        "challenge": challenge,
        "notification_hours": hours,
        "restriction_state": state,
        "level": level,
        "predicted_best_hour": best_hour,
    }


async def main(in_memory: bool = False) -> None:
    """Main application entry point"""
    db = None
    try:
        # Validate configuration
        logger.info("Validating configuration...")
        validate_config()

        if in_memory:
            container = build_in_memory_container()
        else:
            logger.info("Initializing database connection pool...")
            db = Database()
            await db.init_pool()
            await create_schema(db)
            container = build_postgres_container(db)

        summary = await daily_refresh(container)
        logger.info(
            f"Daily refresh complete: target {summary['challenge'].target_repetitions} reps, "
            f"notifications at {summary['notification_hours']}, "
            f"restriction {summary['restriction_state'].value}"
        )

    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
    finally:
        if db:
            logger.info("Closing database connection...")
            await db.close_pool()

        logger.info("Shutdown complete")


def run() -> None:
    """Console entry point"""
    parser = argparse.ArgumentParser(description="Run the habit engine daily refresh")
    parser.add_argument("--in-memory", action="store_true", help="Use process-local stores instead of PostgreSQL")
    args = parser.parse_args()
    asyncio.run(main(in_memory=args.in_memory))


if __name__ == "__main__":
    run()
