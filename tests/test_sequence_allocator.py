"""
Tests for sequence allocator strategies.
"""
import asyncio
from types import SimpleNamespace

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError

from shorturl_app.exceptions import StoreError
from shorturl_app.sequence.factory import SequenceAllocatorFactory, SequenceBackend
from shorturl_app.sequence.strategies import DatabaseSequenceAllocator, RedisSequenceAllocator


class FakeRedis:
    """Just enough of redis.asyncio.Redis for INCR"""

    def __init__(self):
        self.values = {}

    async def incr(self, key):
        self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]


class DownRedis:
    async def incr(self, key):
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")


async def allocate_in_new_session(session_factory, name="url_count"):
    async with session_factory() as session:
        return await DatabaseSequenceAllocator(session).allocate(name)


class TestDatabaseAllocator:
    """Test counters stored in the SQL database"""

    def test_first_value_is_one(self, database):
        assert asyncio.run(allocate_in_new_session(database)) == 1

    def test_sequential_allocations_increase_by_one(self, database):
        async def scenario():
            async with database() as session:
                allocator = DatabaseSequenceAllocator(session)
                return [await allocator.allocate("url_count") for _ in range(5)]

        assert asyncio.run(scenario()) == [1, 2, 3, 4, 5]

    def test_counters_are_independent(self, database):
        async def scenario():
            async with database() as session:
                allocator = DatabaseSequenceAllocator(session)
                return [
                    await allocator.allocate("url_count"),
                    await allocator.allocate("other"),
                    await allocator.allocate("url_count"),
                ]

        assert asyncio.run(scenario()) == [1, 1, 2]

    def test_value_persists_across_sessions(self, database):
        asyncio.run(allocate_in_new_session(database))
        asyncio.run(allocate_in_new_session(database))

        assert asyncio.run(allocate_in_new_session(database)) == 3

    def test_concurrent_allocations_are_distinct_and_consecutive(self, database):
        """Test N concurrent callers get exactly the values 1..N"""
        n = 20

        async def scenario():
            return await asyncio.gather(
                *(allocate_in_new_session(database) for _ in range(n))
            )

        values = asyncio.run(scenario())
        assert sorted(values) == list(range(1, n + 1))

    def test_empty_name_rejected(self, database):
        with pytest.raises(ValueError):
            asyncio.run(allocate_in_new_session(database, name=""))

    def test_store_down_raises_store_error(self, broken_store):
        with pytest.raises(StoreError):
            asyncio.run(allocate_in_new_session(broken_store.session_factory))

    def test_failed_commit_leaves_counter_unchanged(self, database):
        """Test a rolled back increment is not visible to the next caller"""
        async def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        async def failed_allocation():
            async with database() as session:
                allocator = DatabaseSequenceAllocator(session)
                session.commit = failing_commit
                await allocator.allocate("url_count")

        asyncio.run(allocate_in_new_session(database))
        asyncio.run(allocate_in_new_session(database))
        with pytest.raises(StoreError):
            asyncio.run(failed_allocation())

        assert asyncio.run(allocate_in_new_session(database)) == 3

    def test_unsupported_dialect(self):
        session = SimpleNamespace(bind=SimpleNamespace(dialect=SimpleNamespace(name="mysql")))
        allocator = DatabaseSequenceAllocator(session)

        with pytest.raises(StoreError, match="mysql"):
            asyncio.run(allocator.allocate("url_count"))


class TestRedisAllocator:
    """Test counters stored as Redis keys"""

    def test_incr_sequence(self):
        redis_client = FakeRedis()
        allocator = RedisSequenceAllocator(redis_client)

        async def scenario():
            return [await allocator.allocate("url_count") for _ in range(3)]

        assert asyncio.run(scenario()) == [1, 2, 3]
        assert redis_client.values == {"counter:url_count": 3}

    def test_redis_down_raises_store_error(self):
        allocator = RedisSequenceAllocator(DownRedis())

        with pytest.raises(StoreError):
            asyncio.run(allocator.allocate("url_count"))


class TestSequenceAllocatorFactory:
    """Test allocator factory"""

    def teardown_method(self):
        SequenceAllocatorFactory.clear_instance()

    def test_creates_database_allocator(self, database):
        async def scenario():
            async with database() as session:
                return SequenceAllocatorFactory.create(SequenceBackend.DATABASE, session=session)

        assert isinstance(asyncio.run(scenario()), DatabaseSequenceAllocator)

    def test_database_allocator_needs_session(self):
        with pytest.raises(ValueError):
            SequenceAllocatorFactory.create(SequenceBackend.DATABASE)

    def test_redis_allocator_is_shared(self):
        """Test the Redis allocator is created once (no connection is made)"""
        first = SequenceAllocatorFactory.create(SequenceBackend.REDIS)
        second = SequenceAllocatorFactory.create(SequenceBackend.REDIS)

        assert isinstance(first, RedisSequenceAllocator)
        assert first is second

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            SequenceAllocatorFactory.create("memory")
