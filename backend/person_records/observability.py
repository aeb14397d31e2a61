"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire

from person_records import __version__
from person_records.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> bool:
    """
    Initialize Logfire when a token is configured.

    Instruments:
    - PyMongo command monitoring (covers the Motor client used by Beanie)
    - Python logging (bridges to Logfire)

    Args:
        settings: Application settings containing the Logfire token

    Returns:
        True if Logfire was configured, False if it was skipped or failed.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="person-records",
            service_version=__version__,
        )

        logfire.instrument_pymongo()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        # Continue running - observability is optional
        return False
