"""Crawl driver: drains the work queue and dispatches each item."""
import logging
from typing import Callable, Optional, Set

from crawler.exceptions import CrawlError
from crawler.fetcher import Fetcher
from crawler.items import (
    CatalogFetch,
    ChapterFetch,
    Completion,
    CrawlResult,
    ImageFetch,
)
from crawler.middlewares import ErrorHandlingMiddleware
from crawler.pipelines import FilePipeline
from crawler.settings import CATALOG_NAME, CATALOG_PATH, CHAPTER_PATH
from crawler.spiders.base_spider import BaseSpider
from crawler.spiders.linovelib import LinovelibSpider
from crawler.work_queue import QueueSender, WorkQueue

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Crawl one novel from its catalog to the end of its chapter chain.

    Items are processed one at a time, in queue order. Processing an item
    fetches it, persists it, and enqueues whatever it leads to:

    - catalog: the first chapter
    - chapter: its images, then the next chapter (or the completion sentinel
      when the chain points back at the catalog)
    - image: nothing

    The crawl ends when the sentinel is consumed, or when the queue runs dry
    without it, which happens when the chain dead-ends or loops back on an
    already visited chapter.
    """

    def __init__(
            self,
            fetcher: Fetcher,
            spider: Optional[BaseSpider] = None,
            pipeline: Optional[FilePipeline] = None,
            site_url: str = "https://w.linovelib.com",
            error_handler: Optional[ErrorHandlingMiddleware] = None,
            progress: Callable[[str], None] = print,
    ):
        self.fetcher = fetcher
        self.spider = spider or LinovelibSpider()
        self.pipeline = pipeline or FilePipeline()
        self.site_url = site_url.rstrip("/")
        self.error_handler = error_handler or ErrorHandlingMiddleware()
        self.progress = progress

        self._handlers = {
            CatalogFetch: self.handle_catalog,
            ChapterFetch: self.handle_chapter,
            ImageFetch: self.handle_image,
        }
        self._seen_chapters: Set[str] = set()

    @classmethod
    def from_settings(cls, settings, progress: Callable[[str], None] = print):
        return cls(
            fetcher=Fetcher.from_settings(settings),
            pipeline=FilePipeline.from_settings(settings),
            site_url=settings.site_url,
            error_handler=ErrorHandlingMiddleware.from_settings(settings),
            progress=progress,
        )

    def catalog_url(self, novel_id: str) -> str:
        return self.site_url + CATALOG_PATH.format(novel_id=novel_id)

    def chapter_url(self, novel_id: str, filename: str) -> str:
        return self.site_url + CHAPTER_PATH.format(novel_id=novel_id, filename=filename)

    def run(self, novel_id: str) -> CrawlResult:
        """
        Crawl a novel.

        Raises:
            CrawlError: on the first error the error handler deems fatal
        """
        logger.info(f"=== Starting crawl for novel {novel_id} ===")

        queue = WorkQueue()
        result = CrawlResult(novel_id=novel_id)
        self._seen_chapters = set()

        with queue.sender() as seed:
            seed.put(CatalogFetch(novel_id=novel_id))

        while True:
            item = queue.get()

            if item is None:
                logger.warning(
                    f"Queue drained before reaching the end of the chapter chain "
                    f"for novel {novel_id}"
                )
                break

            if isinstance(item, Completion):
                result.completed = True
                break

            with queue.sender() as sender:
                self.process(item, sender, result)
            result.items_processed += 1

        logger.info(
            f"=== Crawl for novel {novel_id} finished: "
            f"{'COMPLETE' if result.completed else 'INCOMPLETE'} "
            f"({result.chapters} chapters, {result.images} images, "
            f"{result.images_skipped} images skipped) ==="
        )
        return result

    def process(self, item, sender: QueueSender, result: CrawlResult) -> None:
        """Fully process one item, enqueueing follow-on items through ``sender``."""
        handler = self._handlers[type(item)]
        try:
            handler(item, sender, result)
        except CrawlError as e:
            if self.error_handler.handle(item, e) is not None:
                raise
            result.images_skipped += 1

    def handle_catalog(self, item: CatalogFetch, sender: QueueSender, result: CrawlResult):
        novel_id = item.novel_id
        url = self.catalog_url(novel_id)

        response = self.fetcher.fetch_page(url)
        self.pipeline.persist_catalog(novel_id, response.body)

        page = self.spider.parse_catalog(response.text, url)
        self._enqueue_chapter(sender, novel_id, page.first_chapter_filename)

        self._report(f"catalog {novel_id} saved")

    def handle_chapter(self, item: ChapterFetch, sender: QueueSender, result: CrawlResult):
        novel_id = item.novel_id
        filename = item.chapter_filename
        url = self.chapter_url(novel_id, filename)

        response = self.fetcher.fetch_page(url)
        self.pipeline.persist_chapter(novel_id, filename, response.body)

        page = self.spider.parse_chapter(response.text, url)

        # Images go first so they are downloaded before the next chapter
        for image_url in page.image_urls:
            sender.put(ImageFetch(
                novel_id=novel_id,
                chapter_filename=filename,
                image_url=image_url,
            ))

        for next_filename in page.next_filenames:
            if next_filename == CATALOG_NAME:
                sender.put(Completion())
            else:
                self._enqueue_chapter(sender, novel_id, next_filename)

        if not page.next_filenames:
            logger.warning(f"Chapter {novel_id}/{filename} has no next-chapter link")

        result.chapters += 1
        self._report(
            f"chapter {novel_id}, {filename}, "
            f"{page.chapter_title}, {page.sub_chapter_title} saved"
        )

    def handle_image(self, item: ImageFetch, sender: QueueSender, result: CrawlResult):
        data = self.fetcher.fetch(item.image_url)
        self.pipeline.persist_image(item.novel_id, item.chapter_filename, item.image_url, data)

        result.images += 1
        self._report(f"image {item.novel_id}, {item.chapter_filename}, {item.image_url} saved")

    def _enqueue_chapter(self, sender: QueueSender, novel_id: str, filename: str) -> None:
        if filename in self._seen_chapters:
            logger.warning(
                f"Chapter {novel_id}/{filename} already visited, "
                f"not following the link again"
            )
            return

        self._seen_chapters.add(filename)
        sender.put(ChapterFetch(novel_id=novel_id, chapter_filename=filename))

    def _report(self, message: str) -> None:
        logger.debug(message)
        self.progress(message)
