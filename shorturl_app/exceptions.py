"""
Error taxonomy for the URL shortener.

Every error is terminal for the current request only:
- URLValidationError -> 200 {"error": "invalid url"}
- NotFoundError      -> 200 {"error": "No short URL found for the given input"}
- StoreError         -> 500 {"error": "server error"} (details are logged, never returned)
"""


class ShortURLError(Exception):
    """Base class for all URL shortener errors"""


class URLValidationError(ShortURLError):
    """Submitted URL is malformed, uses a disallowed scheme, or does not resolve"""

    def __init__(self, url, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class NotFoundError(ShortURLError):
    """No mapping exists for the requested short identifier"""

    def __init__(self, short):
        self.short = short
        super().__init__(f"No short URL found for {short!r}")


class StoreError(ShortURLError):
    """Persistence layer failure (connection loss, failed write, ...)"""


class DuplicateKeyError(StoreError):
    """Insert violated the uniqueness of original_url or short_id"""
