"""Document extractor protocol — turns an attachment into plain text."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class IDocumentExtractor(Protocol):
    """Protocol for attachment text extractors."""

    def supports(self, path: Path) -> bool:
        """True if this extractor can read ``path``."""
        ...

    def extract(self, path: Path) -> str:
        """Return the plain text of ``path``. Raises ExtractionError on failure."""
        ...
