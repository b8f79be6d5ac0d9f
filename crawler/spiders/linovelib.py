"""Extractor for linovelib catalog and chapter pages."""
import re

from scrapy import Selector

from crawler.exceptions import ExtractionError
from crawler.items import CatalogPage, ChapterPage
from crawler.settings import (
    CHAPTER_TITLE_SELECTOR,
    FIRST_CHAPTER_SELECTOR,
    IMAGE_SELECTOR,
    NEXT_URL_PATTERN,
    SUB_CHAPTER_TITLE_SELECTOR,
)
from crawler.spiders.base_spider import BaseSpider


def last_segment(url: str) -> str:
    """Final ``/``-separated segment of a link or path."""
    return url.split("/")[-1]


def first_text(selector: Selector, css: str):
    """First text node inside the first element matching ``css``, or None."""
    return selector.css(css)[:1].xpath(".//text()").get()


class LinovelibSpider(BaseSpider):
    """
    Extractor for linovelib (哔哩轻小说).

    Site URL: https://w.linovelib.com/
    """

    name = "linovelib"

    next_url_regex = re.compile(NEXT_URL_PATTERN)

    def extract_catalog(self, selector: Selector, url: str) -> CatalogPage:
        href = selector.css(FIRST_CHAPTER_SELECTOR).get()
        if not href:
            raise ExtractionError("first chapter link", url)

        return CatalogPage(first_chapter_filename=last_segment(href))

    def extract_chapter(self, selector: Selector, body: str, url: str) -> ChapterPage:
        chapter_title = first_text(selector, CHAPTER_TITLE_SELECTOR)
        if chapter_title is None:
            raise ExtractionError("chapter title", url)

        sub_chapter_title = first_text(selector, SUB_CHAPTER_TITLE_SELECTOR)
        if sub_chapter_title is None:
            raise ExtractionError("sub-chapter title", url)

        # Document order; images without a source are dropped
        image_urls = [
            src for src in (
                img.attrib.get("src", "") for img in selector.css(IMAGE_SELECTOR)
            )
            if src
        ]

        next_filenames = [
            last_segment(match.group(1))
            for match in self.next_url_regex.finditer(body)
        ]

        return ChapterPage(
            chapter_title=chapter_title,
            sub_chapter_title=sub_chapter_title,
            image_urls=image_urls,
            next_filenames=next_filenames,
        )
