"""Output formatter protocol — defines the contract all formatters implement."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from proposal_ai.generation.models import ProposalResult


@dataclass(frozen=True)
class DeckSection:
    """One section of a proposal in linear (reading) order."""

    title: str
    content: str
    order: int
    confidence: Optional[int] = None


@runtime_checkable
class IOutputFormatter(Protocol):
    """Protocol for output formatters (PPTX, plain text, JSON).

    Formatter-specific inputs such as the placeholder map or the linear
    section list are passed as keyword arguments.
    """

    def format(self, proposal: ProposalResult, **kwargs: Any) -> bytes:
        """Render the proposal into output bytes."""
        ...

    def format_to_file(self, proposal: ProposalResult, path: Path, **kwargs: Any) -> Path:
        """Render and write to a file. Returns the output path."""
        ...

    @property
    def content_type(self) -> str:
        """MIME type for the output format."""
        ...

    @property
    def extension(self) -> str:
        """File extension including the leading dot."""
        ...


__all__ = ["DeckSection", "IOutputFormatter"]
