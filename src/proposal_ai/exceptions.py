"""Exception hierarchy for proposal-ai."""


class ProposalError(Exception):
    """Base exception for all proposal-ai errors."""


class ConfigurationError(ProposalError):
    """Raised when a slide configuration document is missing or invalid."""


class TemplateSelectionError(ProposalError):
    """Raised when no template can be selected (empty registry)."""


class PromptRenderError(ProposalError):
    """Raised when a prompt template cannot be parsed or rendered."""


class SlideGenerationError(ProposalError):
    """Raised when generating a single slide fails."""

    def __init__(self, slide_id: str, message: str) -> None:
        super().__init__(message)
        self.slide_id = slide_id


class ProviderError(ProposalError):
    """Raised when the text-completion provider fails after exhausting retries."""


class RetryableError(ProviderError):
    """Rate limits, timeouts, 5xx — should be retried."""


class NonRetryableError(ProviderError):
    """Auth errors, bad requests, 4xx (non-429) — fail immediately."""


class DocumentAssemblyError(ProposalError):
    """Raised when placeholder substitution into a document template fails."""


class ExtractionError(ProposalError):
    """Raised when text extraction from an attachment fails."""
