"""Core domain layer."""

from build_drafter.core.entities import (
    Category,
    DraftRecord,
    LinkType,
    PipelineOutcome,
    PipelinePath,
    SourceItem,
    SourceKind,
    UploadedFile,
)
from build_drafter.core.exceptions import (
    AnalysisError,
    BuildDrafterError,
    CompletionError,
    FetchError,
    NoSourcesError,
    UnsupportedFileError,
)
from build_drafter.core.fallback import synthesize_fallback
from build_drafter.core.interfaces import (
    CompletionClient,
    DraftRenderer,
    DraftStore,
    FetchedPage,
    PageFetcher,
)
from build_drafter.core.merge import merge_drafts

__all__ = [
    "Category",
    "DraftRecord",
    "LinkType",
    "PipelineOutcome",
    "PipelinePath",
    "SourceItem",
    "SourceKind",
    "UploadedFile",
    "AnalysisError",
    "BuildDrafterError",
    "CompletionError",
    "FetchError",
    "NoSourcesError",
    "UnsupportedFileError",
    "synthesize_fallback",
    "CompletionClient",
    "DraftRenderer",
    "DraftStore",
    "FetchedPage",
    "PageFetcher",
    "merge_drafts",
]
