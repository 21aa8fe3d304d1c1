"""Deterministic field-by-field merge of two drafts."""

from datetime import date
from typing import Optional

from build_drafter.core.entities import Category, DraftRecord, unique_tags

DEFAULT_COMBINED_TITLE = "Combined build"


def combine_text(first: Optional[str], second: Optional[str]) -> Optional[str]:
    """Join two texts with a blank line; identical texts are kept once."""
    first = first.strip() if first else ""
    second = second.strip() if second else ""
    if first and second:
        if first == second:
            return first
        return f"{first}\n\n{second}"
    return first or second or None


def _earliest(first: Optional[date], second: Optional[date]) -> Optional[date]:
    if first and second:
        return min(first, second)
    return first or second


def _latest(first: Optional[date], second: Optional[date]) -> Optional[date]:
    if first and second:
        return max(first, second)
    return first or second


def merge_drafts(
    a: Optional[DraftRecord],
    b: Optional[DraftRecord],
    today: Optional[date] = None,
) -> DraftRecord:
    """Merge `a` and `b`, preferring `a` wherever only one value can win.

    Total over its inputs: with one side missing the other is returned as is.
    """
    if a is None and b is None:
        raise ValueError("At least one draft is required")
    if b is None:
        return a
    if a is None:
        return b

    return DraftRecord(
        title=a.title or b.title or DEFAULT_COMBINED_TITLE,
        description=combine_text(a.description, b.description) or DEFAULT_COMBINED_TITLE,
        category=a.category or b.category or Category.OTHER,
        duration_start=_earliest(a.duration_start, b.duration_start) or today or date.today(),
        duration_end=_latest(a.duration_end, b.duration_end),
        tags=unique_tags([*a.tags, *b.tags]),
        role=combine_text(a.role, b.role),
        lesson=combine_text(a.lesson, b.lesson),
        outcomes=combine_text(a.outcomes, b.outcomes),
        source_urls=list(a.source_urls),
        image_url=a.image_url or b.image_url,
        is_public=True,
        ai_generated=True,
    )
