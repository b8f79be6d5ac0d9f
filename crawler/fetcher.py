"""HTTP fetch layer: one GET per call, with a fixed browser User-Agent."""
import logging
from typing import Optional

import requests
from scrapy.http import HtmlResponse

from crawler.exceptions import FetchError
from crawler.middlewares import RetryMiddleware
from crawler.settings import DEFAULT_REQUEST_HEADERS

logger = logging.getLogger(__name__)


class Fetcher:
    """
    Fetch documents and images over HTTP.

    Has no knowledge of the crawl. Non-2xx responses and transport errors are
    raised as FetchError after the retry middleware gives up.
    """

    def __init__(
            self,
            session: Optional[requests.Session] = None,
            timeout: float = 30.0,
            retry: Optional[RetryMiddleware] = None,
    ):
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_REQUEST_HEADERS)
        self.timeout = timeout
        self.retry = retry or RetryMiddleware(max_retries=0)

    @classmethod
    def from_settings(cls, settings):
        return cls(
            timeout=settings.request_timeout,
            retry=RetryMiddleware.from_settings(settings),
        )

    def fetch(self, url: str) -> bytes:
        """Return the response body as bytes."""
        return self.retry.call(lambda: self._get(url).content, url)

    def fetch_page(self, url: str) -> HtmlResponse:
        """
        Return an HTML page with its body bytes untouched.

        Decoding is left to scrapy, which takes the charset from the
        Content-Type header, then from ``<meta charset>``, then detects it.
        """
        return self.retry.call(lambda: self._to_page(url, self._get(url)), url)

    def close(self):
        self.session.close()

    def _get(self, url: str) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise FetchError(url, str(e), status=response.status_code) from e

        return response

    def _to_page(self, url: str, response: requests.Response) -> HtmlResponse:
        headers = {}
        content_type = response.headers.get("Content-Type")
        if content_type:
            headers["Content-Type"] = content_type

        return HtmlResponse(
            url=url,
            status=response.status_code,
            headers=headers,
            body=response.content,
        )
