"""Retry and error-handling policy for crawl items."""
import logging
import time
from typing import Callable, Iterable, Optional

from crawler.exceptions import CrawlError, FetchError
from crawler.items import ImageFetch
from crawler.settings import RETRY_HTTP_CODES

logger = logging.getLogger(__name__)


class RetryMiddleware:
    """Retry transient fetch failures with exponential backoff."""

    def __init__(
            self,
            max_retries: int = 3,
            backoff: float = 1.0,
            retry_http_codes: Iterable[int] = RETRY_HTTP_CODES,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_retries = max_retries
        self.backoff = backoff
        self.retry_http_codes = set(retry_http_codes)
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings):
        return cls(
            max_retries=settings.retry_times,
            backoff=settings.retry_backoff,
        )

    def is_retryable(self, error: FetchError) -> bool:
        """Connection errors carry no status and are always retryable."""
        return error.status is None or error.status in self.retry_http_codes

    def call(self, request: Callable, url: str):
        """Run ``request`` until it succeeds or the retry budget is spent."""
        retry_count = 0
        while True:
            try:
                return request()
            except FetchError as e:
                if not self.is_retryable(e):
                    raise
                if retry_count >= self.max_retries:
                    if self.max_retries:
                        logger.error(f"Max retries reached for {url}")
                    raise

                delay = self.backoff * (2 ** retry_count)
                retry_count += 1
                logger.warning(
                    f"Retrying {url} in {delay:.1f}s "
                    f"(attempt {retry_count}/{self.max_retries}): {e.reason}"
                )
                self.sleep(delay)


class ErrorHandlingMiddleware:
    """
    Decide whether an error raised while processing an item aborts the crawl.

    Only fetch failures of images can be skipped; anything else is fatal.
    """

    def __init__(self, skip_failed_images: bool = True):
        self.skip_failed_images = skip_failed_images

    @classmethod
    def from_settings(cls, settings):
        return cls(skip_failed_images=settings.skip_failed_images)

    def is_skippable(self, item, error: CrawlError) -> bool:
        return (
            self.skip_failed_images
            and isinstance(item, ImageFetch)
            and isinstance(error, FetchError)
        )

    def handle(self, item, error: CrawlError) -> Optional[CrawlError]:
        """
        Return the error if it must abort the crawl, or None once it has
        been logged and skipped.
        """
        if self.is_skippable(item, error):
            logger.warning(f"Skipping {item.kind} {item.image_url}: {error}")
            return None

        logger.error(f"Crawl error on {item.kind} item: {error}")
        return error
