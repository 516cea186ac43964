from sqlalchemy import BigInteger, Column, DateTime, String
from sqlalchemy.sql import func
from shorturl_app.database.connection import Base


class URLMapping(Base):
    """
    Mapping between an original URL and its short identifier.

    Created on the first successful shorten of a URL, never mutated or deleted.
    Both columns are unique: the store, not application code, rejects a
    second mapping for the same URL or the same identifier.
    """
    __tablename__ = "urls"

    # Assigned by the sequence allocator, never by the table
    short_id = Column(BigInteger, primary_key=True, autoincrement=False)
    original_url = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<URLMapping {self.short_id}: {self.original_url}>"
