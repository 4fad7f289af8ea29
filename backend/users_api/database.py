"""
Users API — MongoDB Client Management
======================================

What:  The `Database` object owning the single Motor client, plus the FastAPI
       dependency that hands its `users` collection to route handlers.
Why:   Centralizes all connection logic in one place. The client is built
       explicitly at startup and passed around, never reached through a
       module-level global.
How:   `connect()` creates the client and pings the server; `close()` releases
       it. `main.lifespan` calls both and stores the object on `app.state`.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  One instance per process; collections are looked up per request.

Connection Lifecycle:
    startup   → Database(...) → connect() → logs success or failure
    requests  → get_users_collection(request) → app.state.database.users
    shutdown  → close()

    A failed ping at startup is logged but not fatal: the driver keeps
    retrying server selection, and each request reports its own error.
"""

import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from users_api.config import settings

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the MongoDB client for the lifetime of the process.

    Attributes:
        url:       MongoDB connection string (from settings)
        name:      Database name holding the users collection
        client:    Motor client; may be supplied up front (tests pass an
                   in-memory client) or created lazily by connect()
    """

    def __init__(
        self,
        url: str,
        name: str,
        collection_name: str = "users",
        client: Optional[AsyncIOMotorClient] = None,
    ):
        self.url = url
        self.name = name
        self.collection_name = collection_name
        self.client = client

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(
            url=settings.mongodb_url,
            name=settings.mongodb_database,
            collection_name=settings.users_collection,
        )

    async def connect(self) -> bool:
        """
        Create the client (if needed) and verify the server is reachable.

        Returns:
            True when the ping succeeded, False otherwise.
        """
        if self.client is None:
            self.client = AsyncIOMotorClient(
                self.url,
                serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
            )
        if await self.ping():
            logger.info("Connected to MongoDB (database=%s)", self.name)
            return True
        logger.error("Failed to connect to MongoDB (database=%s)", self.name)
        return False

    async def ping(self) -> bool:
        """Lightweight round-trip used by startup and the health check."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False
        return True

    @property
    def users(self) -> AsyncIOMotorCollection:
        if self.client is None:
            raise RuntimeError("Database.connect() must be called before use")
        return self.client[self.name][self.collection_name]

    def close(self) -> None:
        """Close the client and release its sockets."""
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")


# ── Request Dependencies ──────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """FastAPI dependency returning the process-wide Database object."""
    return request.app.state.database


def get_users_collection(request: Request) -> AsyncIOMotorCollection:
    """
    FastAPI dependency that provides the users collection per request.

    Example usage in a route:
        @router.get("/users")
        async def list_users(collection=Depends(get_users_collection)):
            ...
    """
    return get_database(request).users
