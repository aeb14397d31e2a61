"""
MongoDB connection and Beanie ODM initialization.

This module provides:
- MongoDB client connection via Motor (async driver)
- Beanie ODM initialization for the person document models
- Health check utilities
"""

import logging
from typing import Any
from urllib.parse import urlsplit

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from person_records.config import Settings
from person_records.exceptions import StorageError
from person_records.models import get_document_models

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = "test"


class Database:
    """Scoped MongoDB connection with Beanie models bound to it.

    Use as an async context manager so the client is released on every
    exit path:

        async with Database(settings) as db:
            repository = PersonRepository()
            ...

    A ``client`` passed in by the caller is used as-is: it is not pinged on
    connect and not closed on exit.
    """

    def __init__(self, settings: Settings, client: Any | None = None):
        self.settings = settings
        self._client = client
        self._owns_client = client is None
        self._database: AsyncIOMotorDatabase | None = None

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def database_name(self) -> str:
        return resolve_database_name(self.settings)

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    @property
    def client(self) -> AsyncIOMotorClient:
        """Get the MongoDB client, raising if not connected."""
        if self._client is None or self._database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """Get the MongoDB database, raising if not connected."""
        if self._database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._database

    async def connect(self) -> None:
        """Open the client, verify the server and initialize Beanie."""
        if self._database is not None:
            return

        logger.info(f"Connecting to MongoDB at {sanitize_mongodb_url(self.settings.mongo_uri)}")

        if self._owns_client:
            self._client = AsyncIOMotorClient(
                self.settings.mongo_uri,
                serverSelectionTimeoutMS=self.settings.server_selection_timeout_ms,
            )
            try:
                await self._client.admin.command("ping")
            except PyMongoError as e:
                self._client.close()
                self._client = None
                raise StorageError(f"Failed to connect to MongoDB: {e}", operation="connect") from e

        database = self._client[self.database_name]
        try:
            await init_beanie(database=database, document_models=get_document_models())
        except PyMongoError as e:
            await self.close()
            raise StorageError(f"Failed to initialize Beanie: {e}", operation="connect") from e

        self._database = database
        logger.info(f"Successfully connected to MongoDB database '{self.database_name}'")

    async def close(self) -> None:
        """Release the client if this instance created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Disconnected from MongoDB")
        self._database = None

    async def check_connection(self) -> bool:
        """Check if the MongoDB connection is healthy."""
        if self._client is None:
            return False

        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError:
            return False

    def info(self) -> dict:
        """Get database connection information and status."""
        return {
            "status": "connected" if self.is_connected else "disconnected",
            "url": sanitize_mongodb_url(self.settings.mongo_uri),
            "database": self.database_name,
        }


def resolve_database_name(settings: Settings) -> str:
    """Pick the database: explicit setting, then URI path, then driver default."""
    if settings.mongo_database:
        return settings.mongo_database

    path = urlsplit(settings.mongo_uri).path.lstrip("/")
    return path or DEFAULT_DATABASE_NAME


def sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" not in credentials:
        return url

    username = credentials.split(":", 1)[0]
    return f"{protocol}://{username}:***@{host}"
