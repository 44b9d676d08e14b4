"""Nested pydantic-settings configuration for the application.

Each group reads its own ``PROPOSAL_<GROUP>_*`` env vars::

    export PROPOSAL_LLM_MODEL=bedrock/anthropic.claude-3-5-sonnet-20241022-v2:0
    export PROPOSAL_TEMPLATES_TEMPLATES_DIR=./config/templates
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Text-completion provider configuration.

    Env vars use ``PROPOSAL_LLM_`` prefix::

        export PROPOSAL_LLM_PROVIDER=bedrock
        export PROPOSAL_LLM_AWS_REGION=us-east-1
    """

    model_config = {"env_prefix": "PROPOSAL_LLM_"}

    provider: Literal["bedrock", "openai", "ollama", "litellm", "anthropic"] = "bedrock"
    model: str = "bedrock/anthropic.claude-3-5-sonnet-20241022-v2:0"
    api_key: str = "no-key"
    base_url: str = ""
    timeout: float = 120.0
    max_retries: int = 3
    retry_jitter_factor: float = 0.5
    retry_max_delay: float = 30.0
    aws_region: str = "us-east-1"


class TemplatesConfig(BaseSettings):
    """Template registry and slide configuration locations.

    Env vars use ``PROPOSAL_TEMPLATES_`` prefix.
    """

    model_config = {"env_prefix": "PROPOSAL_TEMPLATES_"}

    templates_dir: Path = Path("./config/templates")
    legacy_config_path: Path = Path("./config/slides.yaml")
    legacy_template_path: Path = Path("./templates/Solution Summary Template.pptx")
    default_template_id: str = "default"
    hot_reload: bool = False
    watch_interval_seconds: float = Field(default=2.0, gt=0.0)


class GenerationConfig(BaseSettings):
    """Generation defaults used when a slide config leaves them unset.

    Env vars use ``PROPOSAL_GENERATION_`` prefix.
    """

    model_config = {"env_prefix": "PROPOSAL_GENERATION_"}

    document_context_chars: int = Field(default=1500, ge=0)
    default_max_tokens: int = Field(default=2000, gt=0)
    default_temperature: float = Field(default=0.7, ge=0.0, le=1.0)


class OutputConfig(BaseSettings):
    """Output artifact configuration.

    Env vars use ``PROPOSAL_OUTPUT_`` prefix.
    """

    model_config = {"env_prefix": "PROPOSAL_OUTPUT_"}

    output_dir: Path = Path("./generated")


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``PROPOSAL_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "PROPOSAL_OBSERVABILITY_"}

    service_name: str = "proposal-ai"
    log_level: str = "INFO"
    log_format: Literal["auto", "console", "json"] = "auto"
    # Level applied to chatty client libraries (litellm, httpx)
    third_party_log_level: str = "WARNING"


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs.

    Each sub-config reads its own ``PROPOSAL_<GROUP>_*`` env vars.
    """

    llm: LLMConfig = LLMConfig()
    templates: TemplatesConfig = TemplatesConfig()
    generation: GenerationConfig = GenerationConfig()
    output: OutputConfig = OutputConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
