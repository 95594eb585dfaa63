"""
MongoDB connection management.

This module provides:
- MongoDB client creation via Motor (async driver)
- Startup connectivity check (fatal when the server is unreachable)
- Connection info with credentials masked for logging
"""

import logging
from typing import Callable

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from guardreport.config import Settings
from guardreport.errors import StartupError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], AsyncIOMotorClient]


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """
    Build the process-wide Motor client. No I/O happens until first use.
    """
    return AsyncIOMotorClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )


async def open_client(
    settings: Settings,
    client_factory: ClientFactory = create_client,
) -> AsyncIOMotorClient:
    """
    Create the client and ping the server once.

    Raises:
        StartupError: The server did not answer; the client is closed.
    """
    client = client_factory(settings)
    info = get_db_info(settings)

    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error(f"MongoDB connection failed ({info['url']}): {e}")
        client.close()
        raise StartupError(f"Could not connect to MongoDB at {info['url']}") from e

    logger.info(f"Connected to MongoDB {info['url']} (database: {info['database']})")
    return client


def get_db_info(settings: Settings) -> dict:
    """
    Get database connection information safe for logging.
    """
    return {
        "url": _sanitize_mongodb_url(settings.mongodb_url),
        "database": settings.mongodb_database,
        "environment": settings.environment,
    }


def _sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
