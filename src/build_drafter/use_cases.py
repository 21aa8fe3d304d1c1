"""Business logic use cases."""

import asyncio
import logging
from datetime import date
from typing import Optional, Union

from build_drafter.config import Settings
from build_drafter.core import (
    AnalysisError,
    Category,
    CompletionClient,
    DraftRecord,
    NoSourcesError,
    PageFetcher,
    PipelineOutcome,
    PipelinePath,
    SourceItem,
    SourceKind,
    UploadedFile,
    merge_drafts,
    synthesize_fallback,
)
from build_drafter.core.schema import DraftPayload
from build_drafter.extraction import SourceExtractor

logger = logging.getLogger(__name__)

ANALYSIS_FALLBACK_ADVISORY = (
    "AI analysis failed; default content was generated. Please review and edit it."
)
TOTAL_FALLBACK_ADVISORY = (
    "AI analysis failed for all sources; default content was generated. "
    "Please review and edit it."
)
MERGE_FALLBACK_ADVISORY = (
    "AI merge failed; results were combined with the default merge rules."
)
PARTIAL_ADVISORY = "Analysis of {failed} failed; showing results from {used} only."

NO_INFORMATION = "(no information)"


def field_instructions(today: date) -> str:
    """Numbered list of the fields the model must return."""
    categories = ", ".join(c.value for c in Category)
    return "\n".join([
        "1. title: title of the project or activity (short and specific)",
        "2. description: what it is about (3-5 sentences)",
        "3. role: the author's role in it (1-2 sentences)",
        f"4. duration_start: start date in YYYY-MM-DD format; if it cannot be "
        f"inferred, use a date three months before {today.isoformat()}",
        "5. duration_end: end date in YYYY-MM-DD format, or null if ongoing",
        "6. lesson: what was learned (2-3 sentences)",
        "7. outcomes: results achieved (2-3 sentences)",
        f"8. category: exactly one of: {categories}",
        "9. tags: related keywords as a JSON array of at most 5 strings",
    ])


class AnalysisRequester:
    """Ask the completion service to draft a record from one batch of sources."""

    def __init__(
        self,
        completion_client: CompletionClient,
        extractor: SourceExtractor,
        settings: Optional[Settings] = None,
    ) -> None:
        self.completion_client = completion_client
        self.extractor = extractor
        self.settings = settings or Settings()

    def build_prompt(self, sources: list[SourceItem], today: date) -> str:
        """Embed labelled, truncated sources and the field list."""
        template = self.settings.prompts.analysis.get("user", "")
        return template.format(
            today=today.isoformat(),
            sources=self.extractor.combine(sources),
            fields=field_instructions(today),
        )

    async def analyze(self, sources: list[SourceItem], today: Optional[date] = None) -> DraftRecord:
        """Return a model-authored draft.

        Raises:
            AnalysisError: the service failed, returned nothing, or returned
                something that is not a JSON object. No retry is attempted.
        """
        if not sources:
            raise ValueError("Cannot analyze an empty batch")

        today = today or date.today()
        prompt = self.build_prompt(sources, today)
        system = self.settings.prompts.analysis.get("system", "")

        try:
            response = await self.completion_client.complete(
                prompt=prompt, system=system, json_mode=True
            )
            payload = DraftPayload.from_response(response)
        except Exception as e:
            logger.warning("Analysis of %d source(s) failed: %s", len(sources), e)
            raise AnalysisError("analysis failed") from e

        source_urls = [s.origin for s in sources if s.kind == SourceKind.LINK]
        return payload.to_draft(synthesize_fallback(sources, today), source_urls=source_urls)


class ResultCombiner:
    """Reconcile two drafts, AI-assisted first and deterministic on failure."""

    def __init__(
        self, completion_client: CompletionClient, settings: Optional[Settings] = None
    ) -> None:
        self.completion_client = completion_client
        self.settings = settings or Settings()

    def build_prompt(self, a: DraftRecord, b: DraftRecord, today: date) -> str:
        template = self.settings.prompts.combine.get("user", "")
        return template.format(
            first=a.description or NO_INFORMATION,
            second=b.description or NO_INFORMATION,
            fields=field_instructions(today),
        )

    async def combine_with_status(
        self,
        a: Optional[DraftRecord],
        b: Optional[DraftRecord],
        today: Optional[date] = None,
    ) -> tuple[DraftRecord, bool]:
        """Combine drafts and report whether the AI merge was used.

        A single present draft is returned unchanged (reported as merged).
        """
        if a is None and b is None:
            raise ValueError("At least one draft is required")
        if a is None or b is None:
            return (a or b), True

        today = today or date.today()
        merged = merge_drafts(a, b, today=today)

        try:
            response = await self.completion_client.complete(
                prompt=self.build_prompt(a, b, today),
                system=self.settings.prompts.combine.get("system", ""),
                json_mode=True,
            )
            payload = DraftPayload.from_response(response)
        except Exception as e:
            logger.warning("AI merge failed, using deterministic merge: %s", e)
            return merged, False

        return payload.to_draft(merged, source_urls=list(a.source_urls)), True

    async def combine(
        self,
        a: Optional[DraftRecord],
        b: Optional[DraftRecord],
        today: Optional[date] = None,
    ) -> DraftRecord:
        """Return one draft from `a` and `b`; does not raise on service failure."""
        draft, _ = await self.combine_with_status(a, b, today=today)
        return draft


class AnalysisPipeline:
    """Sequence extraction, analysis and combination for one request."""

    def __init__(
        self,
        completion_client: CompletionClient,
        fetcher: PageFetcher,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.extractor = SourceExtractor(fetcher, self.settings.extraction)
        self.requester = AnalysisRequester(completion_client, self.extractor, self.settings)
        self.combiner = ResultCombiner(completion_client, self.settings)

    async def run(
        self,
        links: list[str],
        files: list[UploadedFile],
        today: Optional[date] = None,
    ) -> PipelineOutcome:
        """Draft one record from the given links and files.

        Raises:
            NoSourcesError: neither links nor files were given.
            UnsupportedFileError: a file is not plain text.
        """
        links = [link.strip() for link in links if link and link.strip()]
        if not links and not files:
            raise NoSourcesError()

        total = len(links) + len(files)
        if total > self.settings.extraction.max_sources:
            logger.warning(
                "%d sources given, more than the usual %d; processing all of them",
                total, self.settings.extraction.max_sources,
            )

        # Validate files before anything touches the network
        file_items = self.extractor.extract_files(files)
        today = today or date.today()

        if not links:
            return await self._run_single(file_items, PipelinePath.FILES, today)
        if not file_items:
            link_items = await self.extractor.extract_links(links)
            return await self._run_single(link_items, PipelinePath.LINKS, today)
        return await self._run_both(links, file_items, today)

    async def _run_single(
        self, items: list[SourceItem], path: PipelinePath, today: date
    ) -> PipelineOutcome:
        try:
            draft = await self.requester.analyze(items, today=today)
        except AnalysisError:
            logger.info("Falling back to default %s draft", path.value)
            return PipelineOutcome(
                draft=synthesize_fallback(items, today),
                path=PipelinePath.FALLBACK,
                advisory=ANALYSIS_FALLBACK_ADVISORY,
            )
        return PipelineOutcome(draft=draft, path=path)

    async def _analyze_links(
        self, links: list[str], today: date
    ) -> tuple[list[SourceItem], Union[DraftRecord, AnalysisError]]:
        """Fetch and analyze the links as one task; analysis failure is returned."""
        link_items = await self.extractor.extract_links(links)
        try:
            return link_items, await self.requester.analyze(link_items, today=today)
        except AnalysisError as e:
            return link_items, e

    async def _run_both(
        self, links: list[str], file_items: list[SourceItem], today: date
    ) -> PipelineOutcome:
        link_outcome, file_result = await asyncio.gather(
            self._analyze_links(links, today),
            self.requester.analyze(file_items, today=today),
            return_exceptions=True,
        )
        for result in (link_outcome, file_result):
            if isinstance(result, BaseException) and not isinstance(result, AnalysisError):
                raise result

        link_items, link_result = link_outcome

        links_ok = not isinstance(link_result, AnalysisError)
        files_ok = not isinstance(file_result, AnalysisError)

        if links_ok and files_ok:
            draft, used_ai = await self.combiner.combine_with_status(link_result, file_result, today=today)
            return PipelineOutcome(
                draft=draft,
                path=PipelinePath.COMBINED,
                advisory=None if used_ai else MERGE_FALLBACK_ADVISORY,
            )

        if links_ok:
            return PipelineOutcome(
                draft=link_result,
                path=PipelinePath.LINKS_PARTIAL,
                advisory=PARTIAL_ADVISORY.format(failed="files", used="links"),
            )

        if files_ok:
            return PipelineOutcome(
                draft=file_result,
                path=PipelinePath.FILES_PARTIAL,
                advisory=PARTIAL_ADVISORY.format(failed="links", used="files"),
            )

        link_fallback = synthesize_fallback(link_items, today)
        file_fallback = synthesize_fallback(file_items, today)
        return PipelineOutcome(
            draft=merge_drafts(link_fallback, file_fallback, today=today),
            path=PipelinePath.FALLBACK_MERGED,
            advisory=TOTAL_FALLBACK_ADVISORY,
        )


async def run_analysis_pipeline(
    links: list[str],
    files: list[UploadedFile],
    completion_client: CompletionClient,
    fetcher: PageFetcher,
    settings: Optional[Settings] = None,
) -> PipelineOutcome:
    """Caller-facing entry point: draft one record from links and files."""
    pipeline = AnalysisPipeline(completion_client, fetcher, settings)
    return await pipeline.run(links, files)


async def combine_drafts(
    a: Optional[DraftRecord],
    b: Optional[DraftRecord],
    completion_client: CompletionClient,
    settings: Optional[Settings] = None,
) -> DraftRecord:
    """Combine two drafts produced by earlier, separate calls."""
    return await ResultCombiner(completion_client, settings).combine(a, b)
