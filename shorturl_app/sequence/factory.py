"""
Factory for creating sequence allocator instances.
"""

import logging
from enum import Enum
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .strategies import SequenceAllocator, DatabaseSequenceAllocator, RedisSequenceAllocator
from shorturl_app.config import settings

logger = logging.getLogger(__name__)


class SequenceBackend(Enum):
    """Available counter stores"""
    DATABASE = "database"
    REDIS = "redis"


class SequenceAllocatorFactory:
    """
    Simple factory for creating sequence allocators.

    The Redis allocator only holds a connection handle, so a single instance
    is shared by all requests. The database allocator works on the request's
    own session and is built per call.
    Gets configuration from settings (not passed as parameters).
    """

    _redis_instance: Optional[RedisSequenceAllocator] = None

    @classmethod
    def create(
        cls,
        backend: SequenceBackend,
        session: Optional[AsyncSession] = None
    ) -> SequenceAllocator:
        """
        Create a sequence allocator.

        Args:
            backend: Counter store (from enum)
            session: Database session, required for the database backend

        Returns:
            SequenceAllocator instance
        """
        if backend == SequenceBackend.DATABASE:
            if session is None:
                raise ValueError("The database sequence backend needs a session")
            return DatabaseSequenceAllocator(session)

        elif backend == SequenceBackend.REDIS:
            if cls._redis_instance is None:
                import redis.asyncio as redis

                # No ping here: an unreachable server surfaces as StoreError per request
                redis_client = redis.from_url(settings.redis_url)
                cls._redis_instance = RedisSequenceAllocator(redis_client)
                logger.info("Redis sequence allocator initialized")
            return cls._redis_instance

        else:
            raise ValueError(f"Unknown sequence backend: {backend}")

    @classmethod
    async def close(cls):
        """Close the shared Redis connection, if one was opened"""
        if cls._redis_instance is not None:
            await cls._redis_instance.close()
            cls._redis_instance = None

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._redis_instance = None
