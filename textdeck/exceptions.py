from typing import Optional
from datetime import datetime


class DeckError(Exception):
    """Base exception for all presentation workflow errors"""

    def __init__(
        self,
        message: str,
        error_type: str = "general",
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.original_error = original_error
        self.timestamp = datetime.now()

    def __str__(self):
        return f"{self.error_type}: {self.message}"


class DeckValidationError(DeckError):
    """Request or upload validation failed"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_type", "validation")
        super().__init__(message, **kwargs)


class ProviderError(DeckError):
    """The LLM provider failed or returned an unusable slide payload"""

    def __init__(self, message: str, provider: str = "", **kwargs):
        kwargs.setdefault("error_type", "provider")
        super().__init__(message, **kwargs)
        self.provider = provider

    def __str__(self):
        if self.provider:
            return f"[{self.provider}] {self.error_type}: {self.message}"
        return super().__str__()


class RenderError(DeckError):
    """The Marp CLI failed to convert a document"""

    def __init__(
        self,
        message: str,
        exit_status: Optional[int] = None,
        stderr: str = "",
        **kwargs
    ):
        kwargs.setdefault("error_type", "render")
        super().__init__(message, **kwargs)
        self.exit_status = exit_status
        self.stderr = stderr


class RenderCapabilityError(DeckError):
    """Binary rendering is disabled in the current deployment"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_type", "capability_unavailable")
        super().__init__(message, **kwargs)


class TemplateAnalysisError(DeckError):
    """A PowerPoint template could not be read"""

    def __init__(self, message: str = "Failed to analyze PowerPoint template", **kwargs):
        kwargs.setdefault("error_type", "template")
        super().__init__(message, **kwargs)


class PresentationNotFoundError(DeckError):
    """No presentation exists for the requested id"""

    def __init__(self, presentation_id: str, **kwargs):
        kwargs.setdefault("error_type", "not_found")
        super().__init__("Presentation not found", **kwargs)
        self.presentation_id = presentation_id
