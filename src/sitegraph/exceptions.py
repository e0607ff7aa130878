"""Exceptions raised by the site graph crawler."""

from typing import Optional


class SiteGraphError(Exception):
    """Base class for all crawler errors."""


class InvalidRequest(SiteGraphError):
    """Raised when a crawl request is missing a seed URL or is out of bounds."""


class FetchError(SiteGraphError):
    """Raised when a page cannot be fetched (HTTP error, timeout, transport)."""
    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedLink(SiteGraphError):
    """Raised when a discovered href cannot be normalized."""


class GraphFinalizedError(SiteGraphError):
    """Raised when a finalized graph is mutated."""


class CrawlCancelled(SiteGraphError):
    """Raised when a crawl is aborted by its caller.

    The partially built result is attached as ``partial_result``.
    """
    def __init__(self, message: str, partial_result=None):
        self.message = message
        self.partial_result = partial_result
        super().__init__(message)
