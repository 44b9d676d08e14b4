"""Slide configuration: schema models and the hot-reloadable file store.

Usage::

    from proposal_ai.slides import ConfigStore

    store = ConfigStore(Path("config/templates/default/config.yaml"))
    config = store.snapshot()          # one immutable snapshot per request
    for slide in config.enabled_slides():
        ...
"""

from __future__ import annotations

from proposal_ai.slides.models import (
    ComplianceTerms,
    GlobalConfig,
    GlobalFormatting,
    ModelDefaults,
    PlaceholderMapping,
    PromptDefinition,
    ScoringRules,
    SlideDefinition,
    StaticSlideDefinition,
    ValidationRules,
)
from proposal_ai.slides.store import ConfigStore, parse_config, read_config_document

__all__ = [
    "ComplianceTerms",
    "ConfigStore",
    "GlobalConfig",
    "GlobalFormatting",
    "ModelDefaults",
    "PlaceholderMapping",
    "PromptDefinition",
    "ScoringRules",
    "SlideDefinition",
    "StaticSlideDefinition",
    "ValidationRules",
    "parse_config",
    "read_config_document",
]
