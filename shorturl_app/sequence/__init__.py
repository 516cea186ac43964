"""
Sequence allocation for short identifiers.
Implements Strategy Pattern for flexible counter stores.
"""

from .strategies import SequenceAllocator, DatabaseSequenceAllocator, RedisSequenceAllocator
from .factory import SequenceAllocatorFactory, SequenceBackend

__all__ = [
    "SequenceAllocator",
    "DatabaseSequenceAllocator",
    "RedisSequenceAllocator",
    "SequenceAllocatorFactory",
    "SequenceBackend",
]
