"""Exception hierarchy."""

from typing import Optional


class BuildDrafterError(Exception):
    """Base error for the drafting pipeline."""


class CompletionError(BuildDrafterError):
    """Completion service failed or returned no text."""


class FetchError(BuildDrafterError):
    """Link could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisError(BuildDrafterError):
    """A batch could not be turned into a draft by the model."""


class UnsupportedFileError(BuildDrafterError, ValueError):
    """Uploaded file is not plain text."""

    def __init__(self, name: str, declared_type: str = "") -> None:
        detail = f" ({declared_type})" if declared_type else ""
        super().__init__(f"Only text files (txt, md, csv) are supported: {name}{detail}")
        self.name = name
        self.declared_type = declared_type


class NoSourcesError(BuildDrafterError, ValueError):
    """Pipeline was invoked without any link or file."""

    def __init__(self) -> None:
        super().__init__("At least one link or file is required")
