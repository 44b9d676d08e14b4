"""Plain-text formatter — the fallback artifact when a deck cannot be built."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from proposal_ai.formatters.protocols import DeckSection
from proposal_ai.generation.models import ProposalResult


class TextFormatter:
    """Renders every section of a proposal in linear form."""

    def format(self, proposal: ProposalResult, **kwargs: Any) -> bytes:
        """Render *proposal*; ``sections`` (list of DeckSection) sets the body order."""
        sections: Sequence[DeckSection] = kwargs.get("sections") or [
            DeckSection(title=s.title, content=s.content, order=i, confidence=s.confidence)
            for i, s in enumerate(proposal.slides)
        ]
        meta = proposal.metadata
        generated = meta.generated_at

        lines = [
            f"SOLUTION PROPOSAL FOR {meta.client.upper()}",
            f"{meta.project_type} Initiative",
            f"Generated: {generated:%B} {generated.day}, {generated.year}",
            "",
        ]
        for section in sections:
            heading = section.title.upper()
            if section.confidence is not None:
                heading = f"{heading} (Confidence: {section.confidence}%)"
            lines.extend([heading, section.content or "Not available", ""])
        lines.append(f"Overall Confidence Score: {proposal.overall_confidence}%")
        return ("\n".join(lines) + "\n").encode("utf-8")

    def format_to_file(self, proposal: ProposalResult, path: Path, **kwargs: Any) -> Path:
        """Write the text summary to *path* and return it."""
        path.write_bytes(self.format(proposal, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "text/plain; charset=utf-8"

    @property
    def extension(self) -> str:
        return ".txt"
