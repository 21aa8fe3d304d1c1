"""Core domain entities."""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional, Union

MAX_TAGS = 5

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SourceKind(str, Enum):
    """Kind of user-supplied source."""

    LINK = "link"
    FILE = "file"


class LinkType(str, Enum):
    """Platform a link points to."""

    CODE_HOST = "code-host"
    DESIGN_TOOL = "design-tool"
    DOCUMENT_TOOL = "document-tool"
    VIDEO = "video"
    GENERIC_WEBSITE = "generic-website"


class Category(str, Enum):
    """Closed set of build categories."""

    EXTERNAL_ACTIVITY = "external-activity"
    INTERNSHIP = "internship"
    AWARD = "award"
    PROJECT = "project"
    CLUB = "club"
    CERTIFICATE = "certificate"
    EDUCATION = "education"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "External activity"."""
        return self.value.replace("-", " ").capitalize()

    @classmethod
    def parse(cls, value: Any) -> Optional["Category"]:
        """Resolve an enum value or display label, case-insensitively."""
        if isinstance(value, Category):
            return value
        if not isinstance(value, str):
            return None

        key = re.sub(r"[\s_]+", "-", value.strip().lower())
        for category in cls:
            if key == category.value:
                return category
        return None


class PipelinePath(str, Enum):
    """Terminal state reached by one pipeline run."""

    LINKS = "links"
    FILES = "files"
    COMBINED = "combined"
    LINKS_PARTIAL = "links-partial"
    FILES_PARTIAL = "files-partial"
    FALLBACK = "fallback"
    FALLBACK_MERGED = "fallback-merged"


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string; anything else yields None."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    value = value.strip()
    if not _ISO_DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def unique_tags(tags: list[str], limit: int = MAX_TAGS) -> list[str]:
    """Drop blank and duplicate tags, keep first-seen order, cap at limit."""
    result: list[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in result:
            result.append(tag)
    return result[:limit]


@dataclass
class UploadedFile:
    """File handed over by the caller, before extraction."""

    name: str
    content: Union[str, bytes]
    declared_type: str = ""

    def text(self) -> str:
        if isinstance(self.content, bytes):
            return self.content.decode("utf-8", errors="replace")
        return self.content


@dataclass
class SourceItem:
    """One extracted source with provenance."""

    kind: SourceKind
    origin: str
    raw_text: str
    detected_type: Optional[LinkType] = None
    declared_type: str = ""

    def __post_init__(self) -> None:
        if not self.origin:
            raise ValueError("Origin cannot be empty")
        if self.kind == SourceKind.FILE and self.detected_type is not None:
            raise ValueError("Detected type only applies to links")


@dataclass
class DraftRecord:
    """Structured, editable build entry produced by the pipeline."""

    title: str
    description: str
    category: Category
    duration_start: date
    duration_end: Optional[date] = None
    tags: list[str] = field(default_factory=list)
    role: Optional[str] = None
    lesson: Optional[str] = None
    outcomes: Optional[str] = None
    source_urls: list[str] = field(default_factory=list)
    image_url: Optional[str] = None
    is_public: bool = True
    ai_generated: bool = False

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Title cannot be empty")
        if not self.description or not self.description.strip():
            raise ValueError("Description cannot be empty")

        self.tags = unique_tags(self.tags)
        # Keep display order, drop repeats
        self.source_urls = list(dict.fromkeys(url for url in self.source_urls if url))

    def to_dict(self) -> dict[str, Any]:
        """Plain representation with ISO date strings."""
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "duration_start": self.duration_start.isoformat(),
            "duration_end": self.duration_end.isoformat() if self.duration_end else None,
            "tags": list(self.tags),
            "role": self.role,
            "lesson": self.lesson,
            "outcomes": self.outcomes,
            "source_urls": list(self.source_urls),
            "image_url": self.image_url,
            "is_public": self.is_public,
            "ai_generated": self.ai_generated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DraftRecord":
        """Inverse of to_dict."""
        start = parse_iso_date(data.get("duration_start"))
        if start is None:
            raise ValueError(f"Invalid duration_start: {data.get('duration_start')!r}")

        category = Category.parse(data.get("category"))
        if category is None:
            raise ValueError(f"Unknown category: {data.get('category')!r}")

        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            category=category,
            duration_start=start,
            duration_end=parse_iso_date(data.get("duration_end")),
            tags=list(data.get("tags") or []),
            role=data.get("role"),
            lesson=data.get("lesson"),
            outcomes=data.get("outcomes"),
            source_urls=list(data.get("source_urls") or []),
            image_url=data.get("image_url"),
            is_public=bool(data.get("is_public", True)),
            ai_generated=bool(data.get("ai_generated", False)),
        )


@dataclass
class PipelineOutcome:
    """Draft plus an optional non-fatal advisory for the user."""

    draft: DraftRecord
    path: PipelinePath
    advisory: Optional[str] = None
