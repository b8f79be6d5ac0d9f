# Site constants for the linovelib crawler

# URL templates, relative to the configured site url
CATALOG_PATH = "/novel/{novel_id}/catalog"
CHAPTER_PATH = "/novel/{novel_id}/{filename}"

# Logical name of the catalog artifact, and the path segment that marks the
# end of the chapter chain
CATALOG_NAME = "catalog"

# Override the default request headers
DEFAULT_REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/96.0.4664.93 Safari/537.36"
    ),
}

# Selectors
FIRST_CHAPTER_SELECTOR = "a.chapter-li-a::attr(href)"
CHAPTER_TITLE_SELECTOR = "h3"
SUB_CHAPTER_TITLE_SELECTOR = "h1"
IMAGE_SELECTOR = "div.divimage img"

# The next-chapter pointer lives in an inline script, not in the DOM
NEXT_URL_PATTERN = r"url_next:'([^']+)'"

# Retry settings
RETRY_HTTP_CODES = [500, 502, 503, 504, 522, 524, 408, 429]
