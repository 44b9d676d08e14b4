"""proposal-ai: configuration-driven proposal deck generation.

Usage::

    from proposal_ai import AppSettings, IntakeData, ProposalService
    from proposal_ai.providers import LiteLLMTextProvider

    settings = AppSettings()
    service = ProposalService(settings, LiteLLMTextProvider(settings.llm))
    result = await service.generate_deck(IntakeData(...))
"""

from __future__ import annotations

from proposal_ai.core.config import AppSettings
from proposal_ai.models import IntakeData
from proposal_ai.services.proposal_service import DeckResult, ProposalService

__version__ = "0.1.0"

__all__ = ["AppSettings", "DeckResult", "IntakeData", "ProposalService", "__version__"]
