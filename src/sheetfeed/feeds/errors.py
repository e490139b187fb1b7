"""Exceptions raised while loading and mapping spreadsheet feeds."""

from typing import Optional


class SheetFeedError(Exception):
    """Base class for every error raised by sheetfeed."""


class ConfigError(SheetFeedError):
    """Raised when an entity is constructed without its required identity."""


class TransportError(SheetFeedError):
    """Raised when the underlying HTTP request could not be completed."""


class AuthError(SheetFeedError):
    """Raised when the feed keeps answering 401 after every credential refresh."""

    def __init__(self, url: str, attempts: int):
        self.url = url
        self.attempts = attempts
        super().__init__(f"Still unauthorized after {attempts} attempts: {url}")


class RemoteFeedError(SheetFeedError):
    """Raised for any non-200 response that is not retried.

    The raw response body is kept in ``detail`` for diagnostics.
    """

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Feed request failed with status {status_code}: {detail}")


class ParseError(SheetFeedError):
    """Raised when a feed body is not well-formed XML."""


class NotFoundError(SheetFeedError):
    """Raised when a worksheet, row or cell is not present in the feed."""


class EmptyResultError(SheetFeedError):
    """Raised when a feed has no entries but at least one was expected."""
