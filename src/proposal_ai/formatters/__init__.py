"""Output formatters for rendering a ProposalResult to various formats.

Usage::

    from proposal_ai.formatters import PptxFormatter, TextFormatter

    deck = PptxFormatter(Path("templates/default.pptx"))
    deck_bytes = deck.format(proposal, placeholders={"COMPANY_NAME": "Acme"})

    text = TextFormatter()
    text_bytes = text.format(proposal)
"""

from __future__ import annotations

from typing import Any

from proposal_ai.formatters.json_formatter import JSONFormatter
from proposal_ai.formatters.protocols import DeckSection, IOutputFormatter
from proposal_ai.formatters.text_formatter import TextFormatter

__all__ = [
    "DeckSection",
    "IOutputFormatter",
    "JSONFormatter",
    "PptxFormatter",
    "TextFormatter",
]


def __getattr__(name: str) -> Any:
    """Lazy-load PptxFormatter so python-pptx is only imported when needed."""
    if name == "PptxFormatter":
        from proposal_ai.formatters.pptx_formatter import PptxFormatter

        return PptxFormatter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
