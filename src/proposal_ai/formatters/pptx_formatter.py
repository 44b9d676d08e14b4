"""PPTX formatter — substitutes ``{TOKEN}`` placeholders into a template deck.

Run-level formatting is preserved: a token inside a single run is replaced in
place; a token split across runs collapses the paragraph's text into its
first run. Multi-line values become line breaks carrying the first run's
character properties.
"""

from __future__ import annotations

import copy
import io
import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from pptx import Presentation
from pptx.oxml.ns import qn
from pptx.shapes.group import GroupShape

from proposal_ai.exceptions import DocumentAssemblyError
from proposal_ai.generation.models import ProposalResult

log = logging.getLogger(__name__)

# Any brace-delimited name is looked up; only upper-case ones are reported as leftovers
ANY_TOKEN_RE = re.compile(r"\{[^{}\s]+\}")
TOKEN_RE = re.compile(r"\{[A-Z][A-Z0-9_]*\}")

PPTX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def iter_text_frames(shapes: Any) -> Iterator[Any]:
    """Yield every text frame in ``shapes``, descending into groups and tables."""
    for shape in shapes:
        if isinstance(shape, GroupShape):
            yield from iter_text_frames(shape.shapes)
            continue
        if shape.has_text_frame:
            yield shape.text_frame
        if getattr(shape, "has_table", False):
            for row in shape.table.rows:
                for cell in row.cells:
                    yield cell.text_frame


def _replace_all(text: str, tokens: Mapping[str, str]) -> str:
    return ANY_TOKEN_RE.sub(lambda m: tokens.get(m.group(0), m.group(0)), text)


def replace_in_paragraph(paragraph: Any, tokens: Mapping[str, str]) -> int:
    """Replace ``tokens`` (``{NAME}`` → value) in one paragraph. Returns replacements made."""
    runs = list(paragraph.runs)
    full_text = "".join(run.text for run in runs)
    found = [m.group(0) for m in ANY_TOKEN_RE.finditer(full_text) if m.group(0) in tokens]
    if not found:
        return 0

    new_text = _replace_all(full_text, tokens)
    run_texts = [_replace_all(run.text, tokens) for run in runs]
    spans_runs = "".join(run_texts) != new_text

    if "\n" in new_text:
        _rewrite_multiline(paragraph, new_text)
    elif spans_runs:
        runs[0].text = new_text
        for run in runs[1:]:
            run.text = ""
    else:
        for run, text in zip(runs, run_texts):
            if run.text != text:
                run.text = text
    return len(found)


def _rewrite_multiline(paragraph: Any, text: str) -> None:
    """Set paragraph text with line breaks, re-applying the first run's properties."""
    first = paragraph.runs[0]._r if paragraph.runs else None
    rpr = first.find(qn("a:rPr")) if first is not None else None
    rpr_copy = copy.deepcopy(rpr) if rpr is not None else None

    paragraph.text = text

    if rpr_copy is None:
        return
    for run in paragraph.runs:
        existing = run._r.find(qn("a:rPr"))
        if existing is not None:
            run._r.remove(existing)
        run._r.insert(0, copy.deepcopy(rpr_copy))


class PptxFormatter:
    """Renders a proposal by filling a ``.pptx`` template's placeholders."""

    def __init__(self, template_path: Path) -> None:
        self._template_path = template_path
        self.unreplaced: list[str] = []

    def substitute(self, presentation: Any, placeholders: Mapping[str, str]) -> int:
        """Substitute into every slide of ``presentation``. Returns replacements made."""
        tokens = {f"{{{name}}}": value for name, value in placeholders.items()}
        count = 0
        for slide in presentation.slides:
            for frame in iter_text_frames(slide.shapes):
                for paragraph in frame.paragraphs:
                    count += replace_in_paragraph(paragraph, tokens)
        return count

    @staticmethod
    def find_tokens(presentation: Any) -> list[str]:
        """Placeholder-looking tokens left in the deck, in first-seen order."""
        seen: list[str] = []
        for slide in presentation.slides:
            for frame in iter_text_frames(slide.shapes):
                for token in TOKEN_RE.findall(frame.text):
                    if token not in seen:
                        seen.append(token)
        return seen

    def format(self, proposal: ProposalResult, **kwargs: Any) -> bytes:
        """Fill the template with ``placeholders`` (bare name → value) and return the deck bytes."""
        placeholders: Mapping[str, str] = kwargs.get("placeholders") or {}
        if not self._template_path.is_file():
            raise DocumentAssemblyError(f"Template file not found: {self._template_path}")

        try:
            presentation = Presentation(str(self._template_path))
            count = self.substitute(presentation, placeholders)
            self.unreplaced = self.find_tokens(presentation)
            buffer = io.BytesIO()
            presentation.save(buffer)
        except Exception as exc:
            raise DocumentAssemblyError(
                f"Placeholder substitution failed for {self._template_path}: {exc}"
            ) from exc

        log.info("Replaced %d placeholder(s) in %s", count, self._template_path.name)
        if self.unreplaced:
            log.warning("Unreplaced placeholders: %s", ", ".join(self.unreplaced))
        return buffer.getvalue()

    def format_to_file(self, proposal: ProposalResult, path: Path, **kwargs: Any) -> Path:
        """Write the filled deck to *path* and return it."""
        path.write_bytes(self.format(proposal, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return PPTX_CONTENT_TYPE

    @property
    def extension(self) -> str:
        return ".pptx"
