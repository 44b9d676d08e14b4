"""Built-in extractors for plain-text and PPTX attachments."""

from __future__ import annotations

import logging
from pathlib import Path

from pptx import Presentation

from proposal_ai.exceptions import ExtractionError
from proposal_ai.extraction.protocols import IDocumentExtractor
from proposal_ai.formatters.pptx_formatter import iter_text_frames

log = logging.getLogger(__name__)


class PlainTextExtractor:
    """Reads ``.txt`` and ``.md`` files as UTF-8."""

    suffixes = frozenset({".txt", ".md"})

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self.suffixes

    def extract(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ExtractionError(f"Could not read {path}: {exc}") from exc


class PptxTextExtractor:
    """Collects the text of every slide of a ``.pptx`` file."""

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() == ".pptx"

    def extract(self, path: Path) -> str:
        try:
            presentation = Presentation(str(path))
        except Exception as exc:
            raise ExtractionError(f"Could not open {path}: {exc}") from exc

        texts: list[str] = []
        for slide in presentation.slides:
            for frame in iter_text_frames(slide.shapes):
                text = frame.text.strip()
                if text:
                    texts.append(text)
        return "\n".join(texts)


class CompositeExtractor:
    """Dispatches to the first extractor that supports a file's type."""

    def __init__(self, extractors: list[IDocumentExtractor] | None = None) -> None:
        self._extractors = extractors if extractors is not None else [
            PlainTextExtractor(),
            PptxTextExtractor(),
        ]

    def supports(self, path: Path) -> bool:
        return any(e.supports(path) for e in self._extractors)

    def extract(self, path: Path) -> str:
        for extractor in self._extractors:
            if extractor.supports(path):
                return extractor.extract(path)
        raise ExtractionError(f"Unsupported attachment type: {path.suffix or path.name}")


def build_document_context(
    paths: list[Path],
    extractor: IDocumentExtractor,
    max_chars: int = 1500,
) -> str:
    """Join extracted attachment text in order, skipping failures, truncated to ``max_chars``."""
    parts: list[str] = []
    for path in paths:
        try:
            text = extractor.extract(path)
        except ExtractionError as exc:
            log.warning("Skipping attachment %s: %s", path.name, exc)
            continue
        if text.strip():
            parts.append(text.strip())
            log.info("Extracted %d chars from %s", len(text), path.name)
    return "\n\n".join(parts)[:max_chars]
