"""Structured logging for proposal-ai using structlog.

All records, whether from ``logging.getLogger(__name__)`` or a structlog
logger, go through one ``ProcessorFormatter`` on the root handler. Output is
a colored console on a TTY and JSON lines otherwise, unless
``PROPOSAL_OBSERVABILITY_LOG_FORMAT`` forces one.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from proposal_ai.core.config import ObservabilityConfig

# Loggers of the LLM client stack, held at ``third_party_log_level``
NOISY_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy", "litellm", "httpx", "httpcore")


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _use_console(log_format: str) -> bool:
    if log_format == "auto":
        return sys.stderr.isatty()
    return log_format == "console"


def build_formatter(log_format: str = "auto") -> structlog.stdlib.ProcessorFormatter:
    """Formatter for the root handler; JSON output carries the traceback as a field."""
    if _use_console(log_format):
        tail: list[Any] = [structlog.dev.ConsoleRenderer()]
    else:
        tail = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def setup_logging(config: ObservabilityConfig) -> None:
    """Install the structlog formatter on the root logger and bind the service name."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(config.log_format))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("proposal_ai").setLevel(level)
    third_party = getattr(logging, config.third_party_log_level.upper(), logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party)

    structlog.contextvars.bind_contextvars(service=config.service_name)
