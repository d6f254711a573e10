"""Process-wide MongoDB connection management."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from src.config import settings
from src.models.outcomes import ConnectionFailure

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


class MongoConnectionManager:
    """Lazily establishes a single shared MongoDB connection.

    ``ensure_connected`` is idempotent. The first caller dials and pings the
    server while holding a lock; concurrent callers wait for that attempt and
    then reuse its result. A failed attempt leaves the manager disconnected
    so the next request tries again.
    """

    def __init__(
        self,
        uri: str | None,
        database_name: str,
        *,
        server_selection_timeout_ms: int = 5000,
        client_factory: ClientFactory = AsyncMongoClient,
    ) -> None:
        self._uri = uri
        self._database_name = database_name
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._lock = asyncio.Lock()
        self._client: Any | None = None
        self._database: AsyncDatabase | None = None

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    @property
    def database(self) -> AsyncDatabase:
        if self._database is None:
            raise RuntimeError("ensure_connected() must succeed before using the database")
        return self._database

    async def ensure_connected(self) -> ConnectionFailure | None:
        """Connect once; return a ``ConnectionFailure`` when the store is unreachable."""
        if self._database is not None:
            return None

        async with self._lock:
            if self._database is not None:
                return None

            if not self._uri:
                logger.error("MONGODB_URI is not configured")
                return ConnectionFailure(reason="MONGODB_URI is not configured")

            client = None
            try:
                client = self._client_factory(
                    self._uri,
                    serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                    tz_aware=True,
                )
                await client.admin.command("ping")
            except PyMongoError as exc:
                logger.error("Failed to connect to MongoDB: %s", exc, exc_info=True)
                if client is not None:
                    await client.close()
                return ConnectionFailure(reason=str(exc))

            self._client = client
            self._database = client[self._database_name]
            logger.info("Connected to MongoDB database %s", self._database_name)
            return None

    async def close(self) -> None:
        """Tear down the shared client, if one was opened."""
        async with self._lock:
            if self._client is None:
                return
            await self._client.close()
            self._client = None
            self._database = None
            logger.info("Closed MongoDB connection")


_connection_manager = MongoConnectionManager(
    settings.MONGODB_URI,
    settings.MONGODB_DATABASE,
    server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
)


def get_connection_manager() -> MongoConnectionManager:
    """FastAPI dependency returning the process-wide connection manager."""

    return _connection_manager


ConnectionDependency = Annotated[
    MongoConnectionManager, Depends(get_connection_manager)
]
