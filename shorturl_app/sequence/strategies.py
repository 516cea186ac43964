"""
Sequence allocator strategies using Strategy Pattern.
Allows switching between counter stores (SQL database, Redis).

Every strategy delegates atomicity to the store's own increment primitive:
no lock and no counter variable live in this process.
"""

from abc import ABC, abstractmethod

from redis.exceptions import RedisError
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl_app.exceptions import StoreError
from shorturl_app.models.counter import Counter


class SequenceAllocator(ABC):
    """
    Abstract base class for sequence allocators.

    Contract: ``allocate(name)`` atomically creates the counter at 0 if it
    is absent, increments it by one, persists it and returns the new value.
    Concurrent callers on the same name always get distinct, consecutive
    values. On any store failure ``StoreError`` is raised and the counter
    is left unchanged.
    """

    async def allocate(self, name: str) -> int:
        """
        Issue the next value of the named counter.

        Args:
            name: Counter series name (e.g. "url_count")

        Returns:
            The new (post-increment) counter value, starting at 1
        """
        if not name:
            raise ValueError("Counter name must be a non-empty string")
        return await self._increment(name)

    @abstractmethod
    async def _increment(self, name: str) -> int:
        pass


class DatabaseSequenceAllocator(SequenceAllocator):
    """
    Counter rows in the SQL database, incremented with a single upsert:

        INSERT INTO counters (name, value) VALUES (:name, 1)
        ON CONFLICT (name) DO UPDATE SET value = counters.value + 1
        RETURNING value

    One statement, so creation and increment are indivisible. The increment
    is committed immediately, independently of whatever the caller does next.
    """

    _DIALECT_INSERTS = {
        "sqlite": sqlite.insert,
        "postgresql": postgresql.insert,
    }

    def __init__(self, session: AsyncSession):
        self.session = session

    def _build_upsert(self, name: str):
        dialect = self.session.bind.dialect.name
        insert = self._DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise StoreError(f"Atomic counters are not supported on '{dialect}'")

        stmt = insert(Counter).values(name=name, value=1)
        return stmt.on_conflict_do_update(
            index_elements=[Counter.name],
            set_={"value": Counter.value + 1},
        ).returning(Counter.value)

    async def _increment(self, name: str) -> int:
        stmt = self._build_upsert(name)
        try:
            result = await self.session.execute(stmt)
            value = result.scalar_one()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Could not allocate from counter '{name}'") from e
        return value


class RedisSequenceAllocator(SequenceAllocator):
    """
    Counters as Redis keys, incremented with INCR.

    INCR treats a missing key as 0 and is atomic on the server, which is
    exactly the allocation contract.
    """

    KEY_PREFIX = "counter:"

    def __init__(self, redis_client):
        """
        Args:
            redis_client: ``redis.asyncio.Redis`` instance
        """
        self.redis = redis_client

    async def _increment(self, name: str) -> int:
        try:
            return int(await self.redis.incr(f"{self.KEY_PREFIX}{name}"))
        except RedisError as e:
            raise StoreError(f"Could not allocate from counter '{name}'") from e

    async def close(self):
        await self.redis.aclose()
