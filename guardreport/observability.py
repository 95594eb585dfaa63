"""Logfire cloud observability initialization and instrumentation."""

import logging
from typing import Optional

import logfire
from fastapi import FastAPI

from guardreport import __version__
from guardreport.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings, app: Optional[FastAPI] = None) -> bool:
    """
    Initialize Logfire and bridge standard logging into it.

    Must be called once at application startup. Instruments:
    - FastAPI request handling (when app is given)
    - Python logging (bridges to Logfire)

    Args:
        settings: Application settings containing Logfire token
        app: FastAPI application to instrument

    Returns:
        True when Logfire is active. Observability is optional, so a missing
        token or a failed setup only logs a warning.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="guardreport",
            service_version=__version__,
            environment=settings.environment,
        )

        if app is not None:
            logfire.instrument_fastapi(app)

        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())

        logger.info("✓ Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False
