"""Deterministic draft generation used when model analysis fails."""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlparse

from build_drafter.core.entities import (
    Category,
    DraftRecord,
    LinkType,
    SourceItem,
    SourceKind,
)


@dataclass(frozen=True)
class FallbackProfile:
    """Category, tags and default title for one kind of source."""

    category: Category
    tags: tuple[str, ...]
    default_title: str


LINK_PROFILES: dict[LinkType, FallbackProfile] = {
    LinkType.CODE_HOST: FallbackProfile(
        Category.PROJECT, ("development", "GitHub", "coding", "programming"), "GitHub project"
    ),
    LinkType.DESIGN_TOOL: FallbackProfile(
        Category.PROJECT, ("design", "Figma", "UI/UX", "graphics"), "Figma design"
    ),
    LinkType.DOCUMENT_TOOL: FallbackProfile(
        Category.OTHER, ("document", "Notion", "record", "collaboration"), "Notion document"
    ),
    LinkType.VIDEO: FallbackProfile(
        Category.EDUCATION, ("video", "YouTube", "media", "content"), "YouTube video"
    ),
    LinkType.GENERIC_WEBSITE: FallbackProfile(
        Category.PROJECT, ("document", "text", "record", "project"), "Web project"
    ),
}

FILE_PROFILE = FallbackProfile(
    Category.PROJECT, ("document", "text", "record", "project"), "Text-file-based project"
)


def months_before(day: date, months: int) -> date:
    """Same day of month, `months` earlier, clamped to the month's length."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def humanize_name(raw: str) -> str:
    """Turn "my_cool-project" into "My Cool Project"."""
    text = re.sub(r"[-_]+", " ", raw)
    text = re.sub(r"\s+", " ", text).strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def title_from_file_name(name: str) -> str:
    stem = PurePosixPath(name.replace("\\", "/")).name
    if "." in stem.lstrip("."):
        stem = stem.rsplit(".", 1)[0]
    return humanize_name(stem.replace(".", " "))


def title_from_url(url: str) -> str:
    try:
        path = urlparse(url).path
    except ValueError:
        return ""
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return ""
    return humanize_name(unquote(segments[-1]))


def profile_for(sources: list[SourceItem]) -> FallbackProfile:
    """Pick the lookup-table entry for a batch, keyed by its first source."""
    if not sources or sources[0].kind == SourceKind.FILE:
        return FILE_PROFILE
    return LINK_PROFILES[sources[0].detected_type or LinkType.GENERIC_WEBSITE]


def synthesize_fallback(
    sources: list[SourceItem], today: Optional[date] = None
) -> DraftRecord:
    """Build a schema-valid placeholder draft without calling any service.

    The placeholder sentences tell the person editing the draft what to
    write in each field. This function does not raise for any list of
    sources, including an empty one.
    """
    today = today or date.today()
    profile = profile_for(sources)
    noun = profile.category.label.lower()

    title = ""
    if sources:
        first = sources[0]
        if first.kind == SourceKind.FILE:
            title = title_from_file_name(first.origin)
        else:
            title = title_from_url(first.origin)

    source_urls = [s.origin for s in sources if s.kind == SourceKind.LINK]

    return DraftRecord(
        title=title or profile.default_title,
        description=(
            f"Describe this {noun} in detail: what it is about, why it matters, "
            f"and what it set out to achieve."
        ),
        category=profile.category,
        duration_start=months_before(today, 3),
        duration_end=None,
        tags=list(profile.tags),
        role=f"Describe the role you played in this {noun}.",
        lesson=(
            f"Describe what you learned from this {noun}: new skills, concepts "
            f"or experiences."
        ),
        outcomes=(
            f"Describe the results of this {noun}: finished deliverables, goals "
            f"reached or feedback received."
        ),
        source_urls=source_urls,
        is_public=True,
        ai_generated=True,
    )
