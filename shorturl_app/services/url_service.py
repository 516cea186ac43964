import logging
import re
from decimal import Decimal
from typing import Optional

from shorturl_app.exceptions import DuplicateKeyError, NotFoundError
from shorturl_app.models.url import URLMapping
from shorturl_app.sequence.strategies import SequenceAllocator
from shorturl_app.services.url_registry import URLRegistry
from shorturl_app.services.url_validator import URLValidator

logger = logging.getLogger(__name__)

# Largest value a BIGINT column can hold
MAX_SHORT_ID = 2 ** 63 - 1

_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_RADIX_RE = re.compile(r"0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)


def parse_short_id(text: str) -> Optional[int]:
    """
    Read a short identifier the way a JavaScript Number() cast reads it.

    Accepts surrounding whitespace, a sign, integral decimals and exponents
    ("1.0", "1e0", "+1") and 0x/0o/0b literals. Returns None unless the value
    is an integer between 1 and MAX_SHORT_ID.
    """
    text = text.strip()
    if _RADIX_RE.fullmatch(text):
        value = Decimal(int(text, 0))
    elif _DECIMAL_RE.fullmatch(text):
        value = Decimal(text)
    else:
        return None

    if not 1 <= value <= MAX_SHORT_ID or value != value.to_integral_value():
        return None
    return int(value)


class URLService:
    """
    URL Service with dependency injection for registry, allocator and validator.

    Request flow for shorten is a straight line of suspend points:
    validate -> resolve hostname -> registry lookup -> allocate -> insert.
    """

    def __init__(
        self,
        registry: URLRegistry,
        allocator: SequenceAllocator,
        validator: URLValidator,
        counter_name: str = "url_count"
    ):
        """
        Initialize URL service with dependencies.

        Args:
            registry: URL registry bound to the request's session
            allocator: Sequence allocator issuing short identifiers
            validator: URL validator (parse, scheme and DNS checks)
            counter_name: Counter series used for short identifiers
        """
        self.registry = registry
        self.allocator = allocator
        self.validator = validator
        self.counter_name = counter_name

    async def shorten(self, raw_url) -> URLMapping:
        """Get-or-create the mapping for a submitted URL

        Idempotent: a URL that is already stored returns its existing
        mapping and consumes no identifier.

        When a concurrent request inserts the same URL between our lookup and
        our insert, the unique constraint on original_url rejects our row and
        the winner's mapping is returned instead. The identifier we allocated
        is then simply never used.
        """
        parsed = await self.validator.validate(raw_url)

        existing = await self.registry.find_by_url(parsed.original_url)
        if existing:
            return existing

        short_id = await self.allocator.allocate(self.counter_name)
        try:
            mapping = await self.registry.insert(parsed.original_url, short_id)
        except DuplicateKeyError:
            winner = await self.registry.find_by_url(parsed.original_url)
            if winner is None:
                # Conflict was on short_id, which the allocator must never reissue
                raise
            logger.info(
                "Concurrent shorten of %s resolved to %s (discarded %s)",
                parsed.original_url, winner.short_id, short_id
            )
            return winner

        logger.info("Created short URL %s -> %s", mapping.short_id, mapping.original_url)
        return mapping

    async def resolve(self, short: str) -> str:
        """Get the original URL for a short identifier given as path text

        Raises:
            NotFoundError: if ``short`` is not a positive integer or is unassigned
        """
        short_id = parse_short_id(short)
        if short_id is None:
            raise NotFoundError(short)

        mapping = await self.registry.find_by_id(short_id)
        if not mapping:
            raise NotFoundError(short)

        return mapping.original_url
