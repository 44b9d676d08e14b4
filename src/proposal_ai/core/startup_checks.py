"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from proposal_ai.core.config import AppSettings

log = logging.getLogger(__name__)

# Providers that use IAM/local auth and do not require an API key
_NO_KEY_PROVIDERS = frozenset({"bedrock", "ollama"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_templates(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys for providers that need real ones."""
    if settings.llm.provider not in _NO_KEY_PROVIDERS:
        if settings.llm.api_key in ("no-key", ""):
            raise ValueError(
                f"PROPOSAL_LLM_API_KEY is required for provider '{settings.llm.provider}'. "
                f"Set it via environment variable or secrets manager."
            )


def _check_templates(settings: AppSettings) -> None:
    """Warn when neither the templates directory nor the legacy config exists."""
    templates = settings.templates
    if not templates.templates_dir.is_dir() and not templates.legacy_config_path.exists():
        log.warning(
            "Templates directory %s and legacy config %s are both missing. "
            "Proposal generation will fail with 'No templates available'.",
            templates.templates_dir,
            templates.legacy_config_path,
        )
