"""
FastAPI dependencies for dependency injection.

Pattern: Dependency Injection
- Routes depend on URLService only
- URLService depends on registry, allocator and validator
- Tests swap any of them through app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl_app.config import settings
from shorturl_app.database.connection import get_db
from shorturl_app.sequence.factory import SequenceAllocatorFactory, SequenceBackend
from shorturl_app.sequence.strategies import SequenceAllocator
from shorturl_app.services.url_registry import URLRegistry
from shorturl_app.services.url_service import URLService
from shorturl_app.services.url_validator import HostnameResolver, URLValidator


@lru_cache()
def get_hostname_resolver() -> HostnameResolver:
    """
    Get hostname resolver (singleton).

    @lru_cache ensures this is created only once.
    """
    return HostnameResolver()


def get_sequence_allocator(db: AsyncSession = Depends(get_db)) -> SequenceAllocator:
    """Get the allocator for the configured counter store"""
    backend = SequenceBackend(settings.sequence_backend)
    return SequenceAllocatorFactory.create(backend, session=db)


def get_url_service(
    db: AsyncSession = Depends(get_db),
    allocator: SequenceAllocator = Depends(get_sequence_allocator),
    resolver: HostnameResolver = Depends(get_hostname_resolver)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    The registry and the database allocator share the request's session;
    FastAPI resolves get_db once per request.
    """
    return URLService(
        registry=URLRegistry(db),
        allocator=allocator,
        validator=URLValidator(resolver),
        counter_name=settings.counter_name
    )
