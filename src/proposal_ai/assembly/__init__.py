"""Document assembly: placeholder maps, static sections and artifact output."""

from __future__ import annotations

from proposal_ai.assembly.assembler import (
    AssembledDocument,
    DocumentAssembler,
    output_basename,
    sanitize_company_name,
)
from proposal_ai.assembly.placeholders import build_placeholders, placeholder_name
from proposal_ai.assembly.static_sections import StaticSection, resolve_static_sections

__all__ = [
    "AssembledDocument",
    "DocumentAssembler",
    "StaticSection",
    "build_placeholders",
    "output_basename",
    "placeholder_name",
    "resolve_static_sections",
    "sanitize_company_name",
]
