"""Turn links and uploaded files into bounded, labelled text."""

import asyncio
import logging
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from build_drafter.config import ExtractionConfig
from build_drafter.core import (
    FetchedPage,
    LinkType,
    PageFetcher,
    SourceItem,
    SourceKind,
    UnsupportedFileError,
    UploadedFile,
)

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "...(content truncated)"
UNTITLED_FILE_NAME = "untitled.txt"

# Checked in order; the first marker found in the host wins
LINK_MARKERS: list[tuple[tuple[str, ...], LinkType]] = [
    (("github.com",), LinkType.CODE_HOST),
    (("figma.com",), LinkType.DESIGN_TOOL),
    (("notion.so", "notion.site"), LinkType.DOCUMENT_TOOL),
    (("youtube.com", "youtu.be"), LinkType.VIDEO),
]

TEXT_FILE_TYPES = {"text/plain", "text/markdown", "text/x-markdown", "text/csv"}
TEXT_FILE_EXTENSIONS = {".txt", ".md", ".markdown", ".csv"}
GENERIC_DECLARED_TYPES = {"", "application/octet-stream"}

TEXT_CONTENT_TYPES = {"application/json", "application/xhtml+xml"}


def detect_link_type(url: str) -> LinkType:
    """Classify a link by the platform marker in its host."""
    try:
        host = urlparse(url).netloc.lower()
    except ValueError:
        host = ""
    haystack = host or url.lower()

    for markers, link_type in LINK_MARKERS:
        if any(marker in haystack for marker in markers):
            return link_type
    return LinkType.GENERIC_WEBSITE


def is_text_file(name: str, declared_type: str = "") -> bool:
    """Accept plain text, markdown and CSV by declared type or extension."""
    mime = (declared_type or "").split(";")[0].strip().lower()
    if mime in TEXT_FILE_TYPES:
        return True
    if mime not in GENERIC_DECLARED_TYPES:
        return False
    return PurePosixPath(name.lower()).suffix in TEXT_FILE_EXTENSIONS


def truncate_text(text: str, limit: int) -> str:
    """Hard cut at `limit` characters."""
    return text[:limit]


def page_to_text(page: FetchedPage) -> str:
    """Text body of a fetched page, or a placeholder for other content types."""
    mime = page.content_type.split(";")[0].strip().lower()

    if mime in ("text/html", "application/xhtml+xml"):
        soup = BeautifulSoup(page.text, "html.parser")
        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()
        return soup.get_text(separator="\n", strip=True)

    if not mime or mime.startswith("text/") or mime in TEXT_CONTENT_TYPES or mime.endswith("+json"):
        return page.text

    return f"(unsupported content type: {mime})"


def format_source(item: SourceItem) -> str:
    """Labelled block for one source inside a prompt."""
    if item.kind == SourceKind.LINK:
        link_type = item.detected_type.value if item.detected_type else LinkType.GENERIC_WEBSITE.value
        header = f"Link: {item.origin}\nLink type: {link_type}"
    else:
        header = f"File name: {item.origin}\nType: {item.declared_type or 'unknown'}"
    return f"{header}\nContent:\n{item.raw_text}\n\n"


def combine_source_texts(items: list[SourceItem], limit: int) -> str:
    """Join labelled sources; the result never exceeds `limit` characters."""
    combined = "".join(format_source(item) for item in items)
    if len(combined) <= limit:
        return combined
    return combined[:max(limit - len(TRUNCATION_MARKER), 0)] + TRUNCATION_MARKER


class SourceExtractor:
    """Normalize links and files into SourceItems with bounded text."""

    def __init__(self, fetcher: PageFetcher, config: Optional[ExtractionConfig] = None) -> None:
        self.fetcher = fetcher
        self.config = config or ExtractionConfig()

    def extract_file(self, file: UploadedFile) -> SourceItem:
        """Validate and truncate one uploaded file."""
        if not is_text_file(file.name, file.declared_type):
            raise UnsupportedFileError(file.name, file.declared_type)

        return SourceItem(
            kind=SourceKind.FILE,
            origin=file.name.strip() or UNTITLED_FILE_NAME,
            raw_text=truncate_text(file.text(), self.config.per_source_chars),
            declared_type=file.declared_type or "text/plain",
        )

    def extract_files(self, files: list[UploadedFile]) -> list[SourceItem]:
        """Validate every file before any is used."""
        return [self.extract_file(file) for file in files]

    async def extract_link(self, url: str) -> SourceItem:
        """Fetch one link; failures become placeholder text."""
        link_type = detect_link_type(url)
        try:
            page = await self.fetcher.fetch(url)
            text = page_to_text(page)
        except Exception as e:
            logger.warning("Fetching %s failed: %s", url, e)
            text = f"(fetch error: {str(e) or type(e).__name__})"

        return SourceItem(
            kind=SourceKind.LINK,
            origin=url,
            raw_text=truncate_text(text, self.config.per_source_chars),
            detected_type=link_type,
        )

    async def extract_links(self, urls: list[str]) -> list[SourceItem]:
        """Fetch all links concurrently, keeping input order."""
        return list(await asyncio.gather(*(self.extract_link(url) for url in urls)))

    def combine(self, items: list[SourceItem]) -> str:
        return combine_source_texts(items, self.config.combined_chars)
