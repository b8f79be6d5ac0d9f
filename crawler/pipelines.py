"""Artifact storage for fetched catalogs, chapters and images."""
import logging
from pathlib import Path
from typing import List, Set, Union

from crawler.exceptions import PersistError
from crawler.settings import CATALOG_NAME
from crawler.spiders.linovelib import last_segment

logger = logging.getLogger(__name__)


def image_artifact_name(chapter_filename: str, image_url: str) -> str:
    """Provenance-qualified name, so chapters reusing an image basename don't collide."""
    return f"{chapter_filename}_{last_segment(image_url)}"


def check_path_segment(what: str, value: str) -> None:
    """Reject values that would resolve outside their parent directory."""
    if not value or "/" in value or "\\" in value or value in (".", ".."):
        raise PersistError(f"Invalid {what}: {value!r}")


class FilePipeline:
    """
    Write named artifacts under one directory per novel.

    The novel directory is created lazily on the first write for that novel.
    Writing the same name again overwrites the previous content.
    """

    def __init__(self, data_dir: Union[str, Path] = "./data"):
        self.data_dir = Path(data_dir)
        self._created: Set[str] = set()

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.data_dir)

    def novel_dir(self, novel_id: str) -> Path:
        check_path_segment("novel id", novel_id)
        return self.data_dir / novel_id

    def persist(self, novel_id: str, logical_name: str, data: Union[str, bytes]) -> Path:
        """
        Save one artifact.

        Args:
            novel_id: Novel the artifact belongs to
            logical_name: File name inside the novel directory
            data: Raw body; text is stored as UTF-8

        Returns:
            Path of the written file
        """
        check_path_segment("artifact name", logical_name)

        if isinstance(data, str):
            data = data.encode("utf-8")

        novel_dir = self._ensure_novel_dir(novel_id)
        path = novel_dir / logical_name

        try:
            path.write_bytes(data)
        except OSError as e:
            raise PersistError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return path

    def persist_catalog(self, novel_id: str, body: Union[str, bytes]) -> Path:
        return self.persist(novel_id, CATALOG_NAME, body)

    def persist_chapter(self, novel_id: str, chapter_filename: str,
                        body: Union[str, bytes]) -> Path:
        return self.persist(novel_id, chapter_filename, body)

    def persist_image(self, novel_id: str, chapter_filename: str,
                      image_url: str, data: bytes) -> Path:
        return self.persist(novel_id, image_artifact_name(chapter_filename, image_url), data)

    def list_artifacts(self, novel_id: str) -> List[str]:
        """Names of the artifacts saved for a novel, sorted."""
        novel_dir = self.novel_dir(novel_id)
        if not novel_dir.is_dir():
            return []
        return sorted(p.name for p in novel_dir.iterdir() if p.is_file())

    def _ensure_novel_dir(self, novel_id: str) -> Path:
        novel_dir = self.novel_dir(novel_id)
        if novel_id in self._created:
            return novel_dir

        try:
            novel_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistError(f"Failed to create {novel_dir}: {e}") from e

        logger.info(f"Output directory ready: {novel_dir}")
        self._created.add(novel_id)
        return novel_dir
