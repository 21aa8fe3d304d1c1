"""Validation of model replies into draft fields.

Replies go through two stages. `extract_json_object` cuts the first balanced
`{...}` out of the raw text and parses it; `DraftPayload` then checks each
field on its own. A bad field is dropped instead of failing the payload, and
`DraftPayload.to_draft` fills the gaps from a default draft.
"""

import json
from datetime import date
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from build_drafter.core.entities import (
    Category,
    DraftRecord,
    parse_iso_date,
    unique_tags,
)


def find_json_object(text: str) -> Optional[str]:
    """Return the substring from the first `{` to its matching `}`."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def extract_json_object(text: Optional[str]) -> dict[str, Any]:
    """Parse the first JSON object embedded in a model reply.

    Raises ValueError when there is no object or it does not parse.
    """
    if not text or not text.strip():
        raise ValueError("Empty model response")

    candidate = find_json_object(text)
    if candidate is None:
        raise ValueError("No JSON object found in model response")

    data = json.loads(candidate)
    if not isinstance(data, dict):
        raise ValueError("Model response is not a JSON object")
    return data


def _clean_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class DraftPayload(BaseModel):
    """Fields a model may return for one draft, each validated independently."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    role: Optional[str] = None
    lesson: Optional[str] = None
    outcomes: Optional[str] = None
    category: Optional[Category] = None
    duration_start: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("duration_start", "durationStart")
    )
    duration_end: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("duration_end", "durationEnd")
    )
    tags: Optional[list[str]] = None
    image_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    is_public: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("is_public", "isPublic")
    )

    @field_validator("title", "description", "role", "lesson", "outcomes", "image_url", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> Optional[Category]:
        return Category.parse(value)

    @field_validator("duration_start", "duration_end", mode="before")
    @classmethod
    def _date(cls, value: Any) -> Optional[date]:
        # Empty string means "ongoing" for the end date
        return parse_iso_date(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> Optional[list[str]]:
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            return None
        return unique_tags(
            [str(tag) for tag in value if isinstance(tag, (str, int, float)) and not isinstance(tag, bool)]
        )

    @field_validator("is_public", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> Optional[bool]:
        return value if isinstance(value, bool) else None

    @classmethod
    def from_response(cls, text: Optional[str]) -> "DraftPayload":
        """Extract and validate a payload from raw model output."""
        return cls.model_validate(extract_json_object(text))

    def to_draft(
        self, defaults: DraftRecord, source_urls: Optional[list[str]] = None
    ) -> DraftRecord:
        """Build a draft, taking required fields missing here from `defaults`."""
        return DraftRecord(
            title=self.title or defaults.title,
            description=self.description or defaults.description,
            category=self.category or defaults.category,
            duration_start=self.duration_start or defaults.duration_start,
            duration_end=self.duration_end,
            tags=self.tags if self.tags is not None else list(defaults.tags),
            role=self.role,
            lesson=self.lesson,
            outcomes=self.outcomes,
            source_urls=list(source_urls if source_urls is not None else defaults.source_urls),
            image_url=self.image_url or defaults.image_url,
            is_public=self.is_public if self.is_public is not None else True,
            ai_generated=True,
        )
