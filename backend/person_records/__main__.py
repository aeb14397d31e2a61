"""Person Records entry point: run the scripted workflow once."""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from person_records.config import Settings, get_settings
from person_records.database import Database
from person_records.exceptions import ConfigurationError, StorageError
from person_records.observability import initialize_logfire
from person_records.repositories import PersonRepository
from person_records.scenario import ScenarioContext, build_steps, run_scenario

logger = logging.getLogger("person_records")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def run(settings: Settings, database: Database | None = None) -> int:
    """Connect, run every scenario step, disconnect. Returns the exit status."""
    database = database or Database(settings)

    try:
        async with database:
            context = ScenarioContext(repository=PersonRepository())
            report = await run_scenario(context, build_steps(reset=settings.reset_collection))
    except StorageError as e:
        logger.error(f"A major error occurred while talking to MongoDB: {e}")
        return 1

    if report.succeeded:
        logger.info("All operations attempted. Check logs for details.")
    return 0


def main() -> int:
    load_dotenv()
    configure_logging()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    logging.getLogger().setLevel(settings.log_level)
    initialize_logfire(settings)

    return asyncio.run(run(settings))


if __name__ == "__main__":
    sys.exit(main())
