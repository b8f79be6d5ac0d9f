"""Errors raised while crawling a novel."""
from typing import Optional


class CrawlError(Exception):
    """Base class for errors that abort or skip a work item."""


class FetchError(CrawlError):
    """Network failure or non-2xx response."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"Fetching {url} failed: {reason}")


class ExtractionError(CrawlError):
    """A required element was not found in a fetched document."""

    def __init__(self, what: str, location: str):
        self.what = what
        self.location = location
        super().__init__(f"No {what} found in {location}")


class PersistError(CrawlError, OSError):
    """Directory creation or file write failure."""
