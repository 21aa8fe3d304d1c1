"""Tests for source extraction."""

from unittest.mock import AsyncMock

import pytest

from build_drafter.config import ExtractionConfig
from build_drafter.core import (
    FetchedPage,
    FetchError,
    LinkType,
    SourceItem,
    SourceKind,
    UnsupportedFileError,
    UploadedFile,
)
from build_drafter.extraction import (
    TRUNCATION_MARKER,
    SourceExtractor,
    combine_source_texts,
    detect_link_type,
    is_text_file,
    page_to_text,
)


def page(text: str, content_type: str = "text/html; charset=utf-8") -> FetchedPage:
    return FetchedPage(url="https://example.com", status_code=200, content_type=content_type, text=text)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://github.com/octo/hello-world", LinkType.CODE_HOST),
        ("https://www.figma.com/file/abc/Landing", LinkType.DESIGN_TOOL),
        ("https://www.notion.so/team/Retro-123", LinkType.DOCUMENT_TOOL),
        ("https://acme.notion.site/Handbook", LinkType.DOCUMENT_TOOL),
        ("https://www.youtube.com/watch?v=xyz", LinkType.VIDEO),
        ("https://youtu.be/xyz", LinkType.VIDEO),
        ("https://blog.example.com/github.com-tips", LinkType.GENERIC_WEBSITE),
        ("not a url github.com", LinkType.CODE_HOST),
    ],
)
def test_detect_link_type(url: str, expected: LinkType) -> None:
    assert detect_link_type(url) == expected


@pytest.mark.parametrize(
    "name, declared, expected",
    [
        ("notes.txt", "text/plain", True),
        ("README", "text/markdown", True),
        ("data.csv", "text/csv; charset=utf-8", True),
        ("notes.md", "", True),
        ("notes.markdown", "application/octet-stream", True),
        ("photo.png", "image/png", False),
        ("notes.txt", "application/pdf", False),
        ("archive.zip", "", False),
    ],
)
def test_is_text_file(name: str, declared: str, expected: bool) -> None:
    assert is_text_file(name, declared) is expected


def test_page_to_text_strips_html() -> None:
    html = "<html><head><style>p{}</style><script>var x;</script></head><body><h1>Demo</h1><p>Hello</p></body></html>"

    text = page_to_text(page(html))

    assert text == "Demo\nHello"


def test_page_to_text_keeps_json_and_plain_text() -> None:
    assert page_to_text(page('{"name": "repo"}', "application/json")) == '{"name": "repo"}'
    assert page_to_text(page("plain body", "text/plain")) == "plain body"
    assert page_to_text(page("no header", "")) == "no header"


def test_page_to_text_unsupported_type() -> None:
    assert page_to_text(page("%PDF-1.7", "application/pdf")) == "(unsupported content type: application/pdf)"


def test_extract_file_truncates_to_per_source_limit() -> None:
    extractor = SourceExtractor(AsyncMock())

    item = extractor.extract_file(UploadedFile(name="log.txt", content="a" * 5000, declared_type="text/plain"))

    assert item.kind == SourceKind.FILE
    assert item.origin == "log.txt"
    assert len(item.raw_text) == 3000


def test_extract_file_decodes_bytes() -> None:
    extractor = SourceExtractor(AsyncMock())

    item = extractor.extract_file(UploadedFile(name="notes.md", content="héllo".encode("utf-8")))

    assert item.raw_text == "héllo"
    assert item.declared_type == "text/plain"


def test_extract_files_rejects_binary() -> None:
    fetcher = AsyncMock()
    extractor = SourceExtractor(fetcher)

    with pytest.raises(UnsupportedFileError, match="photo.png"):
        extractor.extract_files([
            UploadedFile(name="notes.txt", content="ok", declared_type="text/plain"),
            UploadedFile(name="photo.png", content=b"\x89PNG", declared_type="image/png"),
        ])


@pytest.mark.asyncio
async def test_extract_links_isolates_failures() -> None:
    """One failing link becomes placeholder text without affecting the others."""
    fetcher = AsyncMock()

    async def fetch(url: str) -> FetchedPage:
        if "broken" in url:
            raise FetchError("HTTP 404", status_code=404)
        return page("<p>Readme for " + url + "</p>")

    fetcher.fetch.side_effect = fetch
    extractor = SourceExtractor(fetcher)

    items = await extractor.extract_links([
        "https://github.com/me/app",
        "https://example.com/broken",
        "https://youtu.be/demo",
    ])

    assert [i.origin for i in items] == [
        "https://github.com/me/app",
        "https://example.com/broken",
        "https://youtu.be/demo",
    ]
    assert items[0].raw_text == "Readme for https://github.com/me/app"
    assert items[0].detected_type == LinkType.CODE_HOST
    assert items[1].raw_text == "(fetch error: HTTP 404)"
    assert items[1].detected_type == LinkType.GENERIC_WEBSITE
    assert items[2].detected_type == LinkType.VIDEO
    assert fetcher.fetch.call_count == 3


@pytest.mark.asyncio
async def test_extract_link_truncates_body() -> None:
    fetcher = AsyncMock()
    fetcher.fetch.return_value = page("x" * 10000, "text/plain")
    extractor = SourceExtractor(fetcher, ExtractionConfig(per_source_chars=3000))

    item = await extractor.extract_link("https://example.com/big.txt")

    assert len(item.raw_text) == 3000


def test_combine_source_texts_labels_sources() -> None:
    items = [
        SourceItem(kind=SourceKind.LINK, origin="https://github.com/me/app", raw_text="repo text",
                   detected_type=LinkType.CODE_HOST),
        SourceItem(kind=SourceKind.FILE, origin="notes.md", raw_text="file text", declared_type="text/markdown"),
    ]

    combined = combine_source_texts(items, 8000)

    assert "Link: https://github.com/me/app\nLink type: code-host\nContent:\nrepo text" in combined
    assert "File name: notes.md\nType: text/markdown\nContent:\nfile text" in combined
    assert TRUNCATION_MARKER not in combined


def test_combine_source_texts_never_exceeds_limit() -> None:
    items = [
        SourceItem(kind=SourceKind.FILE, origin=f"part{i}.txt", raw_text="y" * 3000)
        for i in range(3)
    ]

    combined = combine_source_texts(items, 8000)

    assert len(combined) == 8000
    assert combined.endswith(TRUNCATION_MARKER)
