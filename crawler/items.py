"""Work items passed through the crawl queue, and records extracted from pages."""
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class CatalogFetch(BaseModel):
    """Start the crawl of one novel by fetching its catalog."""
    kind: Literal["catalog"] = "catalog"
    novel_id: str

    model_config = ConfigDict(frozen=True)


class ChapterFetch(BaseModel):
    """Fetch and process one chapter page."""
    kind: Literal["chapter"] = "chapter"
    novel_id: str
    chapter_filename: str

    model_config = ConfigDict(frozen=True)


class ImageFetch(BaseModel):
    """Fetch and persist one image embedded in a chapter."""
    kind: Literal["image"] = "image"
    novel_id: str
    chapter_filename: str  # provenance, used for naming only
    image_url: str

    model_config = ConfigDict(frozen=True)


class Completion(BaseModel):
    """Sentinel: the chapter chain has reached the catalog again."""
    kind: Literal["completion"] = "completion"

    model_config = ConfigDict(frozen=True)


WorkItem = Annotated[
    Union[CatalogFetch, ChapterFetch, ImageFetch, Completion],
    Field(discriminator="kind"),
]


class CatalogPage(BaseModel):
    """Facts extracted from a catalog page."""
    first_chapter_filename: str


class ChapterPage(BaseModel):
    """Facts extracted from a chapter page."""
    chapter_title: str
    sub_chapter_title: str
    image_urls: List[str] = []
    next_filenames: List[str] = []


class CrawlResult(BaseModel):
    """Summary of one crawl run."""
    novel_id: str
    completed: bool = False
    items_processed: int = 0
    chapters: int = 0
    images: int = 0
    images_skipped: int = 0
