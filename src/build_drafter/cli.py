"""CLI entry point for build drafter."""

import asyncio
import json
import logging
import mimetypes
from pathlib import Path
from typing import Optional

import typer

from build_drafter.adapters.fetch import HttpPageFetcher
from build_drafter.adapters.llm import ClaudeClient
from build_drafter.adapters.render import MarkdownDraftRenderer
from build_drafter.adapters.storage import YamlDraftStore
from build_drafter.config import Settings, get_settings
from build_drafter.core import BuildDrafterError, PipelineOutcome, UploadedFile
from build_drafter.use_cases import AnalysisPipeline

app = typer.Typer(help="Draft portfolio build entries from links and text files.")


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_file(path: Path) -> UploadedFile:
    """Read a file from disk as an upload."""
    declared_type, _ = mimetypes.guess_type(path.name)
    return UploadedFile(
        name=path.name,
        content=path.read_bytes(),
        declared_type=declared_type or "",
    )


async def async_analyze(
    settings: Settings, links: list[str], files: list[UploadedFile]
) -> PipelineOutcome:
    """Async implementation of the analyze command."""
    pipeline = AnalysisPipeline(
        completion_client=ClaudeClient(settings),
        fetcher=HttpPageFetcher(settings),
        settings=settings,
    )
    return await pipeline.run(links, files)


@app.command()
def analyze(
    link: list[str] = typer.Option([], "--link", "-l", help="Link to analyze (repeatable)"),
    file: list[Path] = typer.Option(
        [], "--file", "-f", exists=True, dir_okay=False, help="Text file to analyze (repeatable)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the draft as JSON"),
    save: bool = typer.Option(False, "--save", help="Save the draft to the draft store"),
    owner: str = typer.Option("local", "--owner", help="Owner id used when saving"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging"),
) -> None:
    """Analyze links and files and print a draft build entry."""
    _setup_logging(debug)
    settings = get_settings(config)

    if not settings.anthropic_api_key:
        typer.echo("⚠️  ANTHROPIC_API_KEY not set: default content will be generated", err=True)

    typer.echo(f"🔍 Analyzing {len(link)} link(s) and {len(file)} file(s)...", err=True)

    try:
        uploads = [_read_file(path) for path in file]
        outcome = asyncio.run(async_analyze(settings, link, uploads))
    except (BuildDrafterError, ValueError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"✅ Draft ready ({outcome.path.value})", err=True)

    if as_json:
        payload = {
            "draft": outcome.draft.to_dict(),
            "advisory": outcome.advisory,
            "path": outcome.path.value,
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        typer.echo(MarkdownDraftRenderer().render(outcome.draft, outcome.advisory))

    if save:
        store = YamlDraftStore(settings.drafts_dir)
        draft_id = store.insert(owner, outcome.draft)
        typer.echo(f"💾 Draft saved: {draft_id} ({settings.drafts_dir / owner})", err=True)


@app.command()
def drafts(
    owner: str = typer.Option("local", "--owner", help="Owner id"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """List saved drafts of one owner."""
    settings = get_settings(config)
    store = YamlDraftStore(settings.drafts_dir)

    saved = store.list_by_owner(owner)
    if not saved:
        typer.echo(f"No drafts saved for '{owner}'")
        return

    for draft_id, draft in saved:
        typer.echo(f"{draft_id}  {draft.duration_start.isoformat()}  [{draft.category.value}] {draft.title}")


if __name__ == "__main__":
    app()
