import sys
from pathlib import Path

# Ensure project root on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from scrapy.http import HtmlResponse

from crawler.exceptions import FetchError
from crawler.orchestrator import Orchestrator
from crawler.pipelines import FilePipeline

SITE = "https://w.linovelib.com"


def html_response(body, url="https://w.linovelib.com/page", content_type="text/html"):
    """A page as the Fetcher returns it; text bodies are sent as UTF-8."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    headers = {"Content-Type": content_type} if content_type else {}
    return HtmlResponse(url=url, headers=headers, body=body)


class FakeFetcher:
    """Serves canned bodies by URL; unknown URLs fail like a 404."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.content_types = {}
        self.requested = []
        self.closed = False

    def _lookup(self, url):
        self.requested.append(url)
        body = self.pages.get(url)
        if body is None:
            raise FetchError(url, "404 Client Error: Not Found", status=404)
        if isinstance(body, Exception):
            raise body
        return body

    def fetch(self, url):
        body = self._lookup(url)
        return body.encode("utf-8") if isinstance(body, str) else body

    def fetch_page(self, url):
        return html_response(
            self.fetch(url),
            url=url,
            content_type=self.content_types.get(url, "text/html"),
        )

    def close(self):
        self.closed = True


def catalog_html(href):
    return f"""
    <html><body>
      <ul class="chapter-list">
        <li><a class="chapter-li-a" href="{href}">第一章</a></li>
      </ul>
    </body></html>
    """


def chapter_html(next_url, images=(), title="第一卷", sub_title="第一章 开始"):
    imgs = "".join(f'<img src="{src}">' for src in images)
    return f"""
    <html><head><script>
      var ReadParams={{url_previous:'/novel/123/catalog',url_next:'{next_url}',page:'1'}};
    </script></head>
    <body>
      <h3>{title}</h3>
      <h1>{sub_title}</h1>
      <div id="acontent">
        <p>正文</p>
        <div class="divimage">{imgs}</div>
      </div>
    </body></html>
    """


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def pipeline(tmp_path):
    return FilePipeline(tmp_path / "data")


@pytest.fixture
def progress_lines():
    return []


@pytest.fixture
def orchestrator(fetcher, pipeline, progress_lines):
    return Orchestrator(
        fetcher=fetcher,
        pipeline=pipeline,
        site_url=SITE,
        progress=progress_lines.append,
    )
