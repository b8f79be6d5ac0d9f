import pytest

from crawler.exceptions import PersistError
from crawler.pipelines import FilePipeline, image_artifact_name


def test_image_artifact_name():
    assert image_artifact_name("456.html", "http://cdn/img/x.jpg") == "456.html_x.jpg"


def test_creates_novel_dir_on_first_write(tmp_path):
    pipeline = FilePipeline(tmp_path / "data")
    assert not (tmp_path / "data").exists()

    path = pipeline.persist("123", "catalog", "<html></html>")

    assert path == tmp_path / "data" / "123" / "catalog"
    assert path.read_text(encoding="utf-8") == "<html></html>"


def test_text_is_stored_as_utf8(tmp_path):
    pipeline = FilePipeline(tmp_path)
    path = pipeline.persist_chapter("123", "456.html", "第一章")
    assert path.read_bytes() == "第一章".encode("utf-8")


def test_persist_is_idempotent(tmp_path):
    pipeline = FilePipeline(tmp_path)

    pipeline.persist_image("123", "456.html", "http://cdn/x.jpg", b"abc")
    first = sorted((p.name, p.read_bytes()) for p in (tmp_path / "123").iterdir())

    pipeline.persist_image("123", "456.html", "http://cdn/x.jpg", b"abc")
    second = sorted((p.name, p.read_bytes()) for p in (tmp_path / "123").iterdir())

    assert first == second == [("456.html_x.jpg", b"abc")]


def test_last_write_wins(tmp_path):
    pipeline = FilePipeline(tmp_path)
    pipeline.persist("123", "catalog", "old")
    pipeline.persist("123", "catalog", "new")
    assert (tmp_path / "123" / "catalog").read_text() == "new"


def test_existing_directory_is_reused(tmp_path):
    (tmp_path / "123").mkdir()
    (tmp_path / "123" / "keep").write_text("x")

    FilePipeline(tmp_path).persist_catalog("123", "body")

    assert FilePipeline(tmp_path).list_artifacts("123") == ["catalog", "keep"]


def test_novels_are_kept_apart(tmp_path):
    pipeline = FilePipeline(tmp_path)
    pipeline.persist_catalog("1", "a")
    pipeline.persist_catalog("2", "b")

    assert (tmp_path / "1" / "catalog").read_text() == "a"
    assert (tmp_path / "2" / "catalog").read_text() == "b"


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "..\\x"])
def test_rejects_names_outside_novel_dir(tmp_path, name):
    with pytest.raises(PersistError):
        FilePipeline(tmp_path).persist("123", name, b"x")


@pytest.mark.parametrize("novel_id", ["", ".", "..", "../x", "a/b", "..\\x"])
def test_rejects_novel_ids_outside_data_dir(tmp_path, novel_id):
    data_dir = tmp_path / "data"
    pipeline = FilePipeline(data_dir)

    with pytest.raises(PersistError):
        pipeline.persist_catalog(novel_id, "body")
    with pytest.raises(PersistError):
        pipeline.list_artifacts(novel_id)

    assert list(tmp_path.iterdir()) == []


def test_write_failure_raises_persist_error(tmp_path):
    pipeline = FilePipeline(tmp_path)
    # A directory where the file should go makes the write fail
    (tmp_path / "123" / "catalog").mkdir(parents=True)

    with pytest.raises(PersistError):
        pipeline.persist_catalog("123", "body")


def test_directory_failure_raises_persist_error(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")

    with pytest.raises(PersistError):
        FilePipeline(blocker).persist_catalog("123", "body")


def test_list_artifacts_for_unknown_novel(tmp_path):
    assert FilePipeline(tmp_path).list_artifacts("nope") == []
