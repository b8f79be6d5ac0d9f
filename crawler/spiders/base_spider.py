"""Base extractor class for all novel sites."""
from abc import ABC, abstractmethod

from scrapy import Selector

from crawler.items import CatalogPage, ChapterPage


class BaseSpider(ABC):
    """
    Base class that all site-specific extractors must inherit from.

    A spider turns fetched documents into extracted facts. It performs no
    I/O and holds no crawl state, so the same document always gives the
    same result.
    """

    # Must be set by child spiders
    name: str = "base"

    def parse_catalog(self, body: str, url: str = "catalog") -> CatalogPage:
        """Parse a catalog page and extract its facts."""
        return self.extract_catalog(Selector(text=body), url)

    def parse_chapter(self, body: str, url: str = "chapter") -> ChapterPage:
        """
        Parse a chapter page and extract its facts.

        The raw body is passed on as well as the parsed document, since some
        facts live in inline scripts rather than in the DOM.
        """
        return self.extract_chapter(Selector(text=body), body, url)

    @abstractmethod
    def extract_catalog(self, selector: Selector, url: str) -> CatalogPage:
        """
        Extract the first chapter link from a catalog page.

        Must raise ExtractionError when no chapter link is present.

        Args:
            selector: Parsed catalog document
            url: Where the document came from, for error messages
        """
        pass

    @abstractmethod
    def extract_chapter(self, selector: Selector, body: str, url: str) -> ChapterPage:
        """
        Extract title, image sources and next-chapter links from a chapter.

        Must raise ExtractionError when a title is missing. Images and
        next-chapter links are optional.

        Args:
            selector: Parsed chapter document
            body: Raw chapter text
            url: Where the document came from, for error messages
        """
        pass
