"""
Storage Module - Black Box Interface

Purpose: Own the Redis connection behind the executor task channel
Interface: connect(), open_channel(), disconnect()
Hidden: Redis client construction, result retention policy

Can be replaced with any storage backend without affecting commands or workers.
"""

import logging
from typing import Optional

import redis.asyncio as redis

from ..queue import TaskChannel

logger = logging.getLogger(__name__)

# Results outlive the dispatcher's wait so a late answer is still readable
RESULT_TTL_FACTOR = 5


class StorageModule:
    """Redis-backed storage for task queues and results."""

    def __init__(self, connection_url: str, result_timeout: int = 60, client: Optional[redis.Redis] = None):
        """
        Initialize storage.

        Args:
            connection_url: Redis URL, e.g. redis://localhost:6379/0
            result_timeout: Seconds a dispatcher waits for a task result
            client: Already connected client to use instead of connecting
        """
        self.url = connection_url
        self.result_timeout = result_timeout
        self._client = client
        self._owns_client = client is None

    @property
    def result_ttl(self) -> int:
        return self.result_timeout * RESULT_TTL_FACTOR

    async def connect(self) -> redis.Redis:
        """Get the Redis client, connecting on first use."""
        if self._client is None:
            logger.info(f"Connecting to task storage at {self.url}")
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    async def open_channel(self, max_tasks_per_fetch: int = 10) -> TaskChannel:
        """Create a task channel whose results are kept for result_ttl seconds."""
        client = await self.connect()
        return TaskChannel(client, max_tasks_per_fetch=max_tasks_per_fetch, result_ttl=self.result_ttl)

    async def disconnect(self):
        """Close the Redis client if this module opened it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None


__all__ = ["RESULT_TTL_FACTOR", "StorageModule"]
