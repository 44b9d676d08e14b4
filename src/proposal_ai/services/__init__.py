"""Application services."""

from __future__ import annotations

from proposal_ai.services.proposal_service import DeckResult, ProposalService

__all__ = ["DeckResult", "ProposalService"]
