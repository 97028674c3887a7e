"""Error types raised by the POI service.

Every error carries a stable machine-readable ``code`` next to its
message so callers can pick a retry policy without parsing text.
"""

from typing import Optional


class POIError(Exception):
    """Base class for all POI failures."""

    def __init__(self, message: str, code: str, category: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category

    def __str__(self) -> str:
        return self.message


class POIFetchError(POIError):
    """Fetching nearby POIs failed and no cached copy could be served."""

    def __init__(self, message: str, code: str = "FETCH_ERROR"):
        super().__init__(message, code)


class POINetworkError(POIFetchError):
    """Transport error, non-success HTTP status or request timeout."""

    def __init__(self, message: str):
        super().__init__(message, "NETWORK_ERROR")


class POIRateLimitError(POIFetchError):
    """The backend answered with HTTP 429."""

    def __init__(self, message: str):
        super().__init__(message, "RATE_LIMIT")


class POIParseError(POIFetchError):
    """The backend response could not be decoded as an element list."""

    def __init__(self, message: str):
        super().__init__(message, "PARSE_ERROR")


class POISearchError(POIError):
    """Free-text search failed. The underlying error is kept in ``cause``."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, "SEARCH_ERROR")
        self.cause = cause
