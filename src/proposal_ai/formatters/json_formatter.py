"""JSON output formatter — companion for scripting and inspection."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from proposal_ai.generation.models import ProposalResult


class JSONFormatter:
    """Renders a ProposalResult as indented JSON bytes."""

    def format(self, proposal: ProposalResult, **kwargs: Any) -> bytes:
        """Serialize *proposal* to pretty-printed JSON bytes."""
        return proposal.model_dump_json(indent=2).encode()

    def format_to_file(self, proposal: ProposalResult, path: Path, **kwargs: Any) -> Path:
        """Write JSON to *path* and return it."""
        path.write_bytes(self.format(proposal, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "application/json"

    @property
    def extension(self) -> str:
        return ".json"
