"""Markdown preview of a draft."""

from typing import Optional

from build_drafter.core import DraftRecord, DraftRenderer


class MarkdownDraftRenderer(DraftRenderer):
    """Render a draft as Markdown for review."""

    def render(self, draft: DraftRecord, advisory: Optional[str] = None) -> str:
        """Render markdown preview."""
        lines = [
            f"# {draft.title}",
            "",
        ]

        if advisory:
            lines.extend([f"> ⚠️ {advisory}", ""])

        lines.append(f"**Category:** {draft.category.label}")
        lines.append(f"**Period:** {self._format_period(draft)}")
        if draft.tags:
            lines.append(f"**Tags:** {', '.join(draft.tags)}")
        lines.append(f"**Visibility:** {'public' if draft.is_public else 'private'}")
        lines.append("")

        lines.extend(["## Description", "", draft.description, ""])

        for heading, text in (
            ("Role", draft.role),
            ("What I learned", draft.lesson),
            ("Outcomes", draft.outcomes),
        ):
            if text:
                lines.extend([f"## {heading}", "", text, ""])

        if draft.source_urls:
            lines.extend(["## Sources", ""])
            for url in draft.source_urls:
                lines.append(f"- {url}")
            lines.append("")

        if draft.ai_generated:
            lines.append("*Drafted automatically; review before publishing.*")
            lines.append("")

        return "\n".join(lines)

    def _format_period(self, draft: DraftRecord) -> str:
        start = draft.duration_start.strftime("%b %Y")
        if draft.duration_end is None:
            return f"since {start} (ongoing)"
        return f"{start} – {draft.duration_end.strftime('%b %Y')}"
