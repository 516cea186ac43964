"""
Database models for the URL shortener.

Both entities live only in the store; the service keeps no in-memory copy.
"""

from .url import URLMapping
from .counter import Counter

__all__ = ["URLMapping", "Counter"]
