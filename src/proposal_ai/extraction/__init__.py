"""Attachment text extraction for the generation context."""

from __future__ import annotations

from proposal_ai.extraction.extractors import (
    CompositeExtractor,
    PlainTextExtractor,
    PptxTextExtractor,
    build_document_context,
)
from proposal_ai.extraction.protocols import IDocumentExtractor

__all__ = [
    "CompositeExtractor",
    "IDocumentExtractor",
    "PlainTextExtractor",
    "PptxTextExtractor",
    "build_document_context",
]
