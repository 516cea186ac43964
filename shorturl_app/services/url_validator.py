"""
URL validation for submitted long URLs.

A URL is accepted when it parses as an absolute URL, uses http or https,
and its hostname resolves at request time.
"""

import asyncio
import logging
from dataclasses import dataclass

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shorturl_app.exceptions import URLValidationError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")

_url_adapter = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class ParsedURL:
    original_url: str  # exactly as submitted, never normalized
    scheme: str
    host: str


class HostnameResolver:
    """
    Live DNS check using the event loop's getaddrinfo.

    Runs in the loop's executor, so the request coroutine suspends while the
    lookup is in flight. Hosts-file entries and IP literals resolve too.
    """

    async def resolves(self, host: str) -> bool:
        loop = asyncio.get_running_loop()
        try:
            await loop.getaddrinfo(host, None)
        except (OSError, UnicodeError) as e:
            logger.debug("DNS lookup failed for %s: %s", host, e)
            return False
        return True


class URLValidator:
    """Validate submitted URLs (parse, scheme check, DNS check)"""

    def __init__(self, resolver: HostnameResolver):
        self.resolver = resolver

    async def validate(self, raw_url) -> ParsedURL:
        """
        Validate a submitted URL.

        Returns:
            ParsedURL carrying the raw input and its scheme/host

        Raises:
            URLValidationError: if the URL is missing, malformed, not http(s),
                has no host, or its host does not resolve
        """
        if not isinstance(raw_url, str) or not raw_url:
            raise URLValidationError(raw_url, "missing url")

        try:
            parsed = _url_adapter.validate_python(raw_url)
        except ValidationError:
            raise URLValidationError(raw_url, "not an absolute URL")

        if parsed.scheme not in ALLOWED_SCHEMES:
            raise URLValidationError(raw_url, f"scheme '{parsed.scheme}' is not allowed")

        if not parsed.host:
            raise URLValidationError(raw_url, "no hostname")

        # IPv6 literals come back bracketed
        host = parsed.host.strip("[]")
        if not await self.resolver.resolves(host):
            raise URLValidationError(raw_url, f"hostname '{host}' does not resolve")

        return ParsedURL(original_url=raw_url, scheme=parsed.scheme, host=host)
