"""Template registry and selection."""

from __future__ import annotations

from proposal_ai.templates.registry import TemplateDescriptor, TemplateRegistry, TemplateSection
from proposal_ai.templates.selector import SelectionCriteria, TemplateSelector

__all__ = [
    "SelectionCriteria",
    "TemplateDescriptor",
    "TemplateRegistry",
    "TemplateSection",
    "TemplateSelector",
]
