"""Exceptions raised by jobcrawler."""

from __future__ import annotations


class FetchError(RuntimeError):
    """Raised when a URL cannot be fetched.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class NotFoundError(FetchError):
    """The server answered 404 for the requested URL."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message, url=url, status=404)


class ConfigurationError(ValueError):
    """Invalid root URL, handler, or crawl settings."""
