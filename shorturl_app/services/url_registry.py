from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl_app.exceptions import DuplicateKeyError, StoreError
from shorturl_app.models.url import URLMapping


class URLRegistry:
    """
    Persistent mapping between original URLs and short identifiers.

    Uniqueness of both keys is enforced by the table constraints; the
    registry only translates store failures into the service's error types.
    Every call is a round trip to the store (no cache).
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_url(self, original_url: str) -> Optional[URLMapping]:
        """Get the mapping for an original URL, or None"""
        return await self._first(select(URLMapping).where(URLMapping.original_url == original_url))

    async def find_by_id(self, short_id: int) -> Optional[URLMapping]:
        """Get the mapping for a short identifier, or None"""
        return await self._first(select(URLMapping).where(URLMapping.short_id == short_id))

    async def insert(self, original_url: str, short_id: int) -> URLMapping:
        """
        Store a new mapping.

        Raises:
            DuplicateKeyError: original_url or short_id is already mapped
            StoreError: any other persistence failure
        """
        mapping = URLMapping(original_url=original_url, short_id=short_id)
        self.session.add(mapping)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateKeyError(
                f"Mapping {short_id} -> {original_url!r} conflicts with an existing one"
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Could not store mapping for {original_url!r}") from e
        return mapping

    async def _first(self, stmt) -> Optional[URLMapping]:
        try:
            return await self.session.scalar(stmt)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError("URL lookup failed") from e
