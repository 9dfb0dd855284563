from typing import Optional
from datetime import datetime


class LLMError(Exception):
    """Base exception for all LLM-related errors"""

    def __init__(
        self,
        message: str,
        provider: str = "",
        error_type: str = "general",
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.error_type = error_type
        self.retry_after = retry_after
        self.original_error = original_error
        self.timestamp = datetime.now()

    def __str__(self):
        return f"[{self.provider}] {self.error_type}: {self.message}"


class LLMAPIError(LLMError):
    """API request failed"""
    pass


class LLMAuthenticationError(LLMError):
    """Authentication failed (invalid API key)"""
    pass


class LLMRateLimitError(LLMError):
    """Rate limit exceeded"""
    pass


class LLMValidationError(LLMError):
    """Request validation failed"""
    pass


class LLMTimeoutError(LLMError):
    """Request timed out"""
    pass


class LLMModelNotFoundError(LLMError):
    """Specified model not found"""
    pass


class LLMInsufficientQuotaError(LLMError):
    """Insufficient API quota"""
    pass


def classify_provider_error(error: Exception, provider: str) -> LLMError:
    """Map an SDK exception onto the LLMError hierarchy.

    The OpenAI and Anthropic SDKs expose ``status_code``; google-genai
    exposes the HTTP status as ``code``. OpenAI reports exhausted credit as
    a 429 whose ``code`` is ``"insufficient_quota"``.
    """
    if isinstance(error, LLMError):
        return error

    status = getattr(error, "status_code", None)
    code = getattr(error, "code", None)
    if status is None and isinstance(code, int):
        status = code
    message = str(error) or error.__class__.__name__
    kwargs = dict(provider=provider, original_error=error)

    if code == "insufficient_quota":
        return LLMInsufficientQuotaError(message, error_type="insufficient_quota", **kwargs)
    if status in (401, 403):
        return LLMAuthenticationError(message, error_type="authentication", **kwargs)
    if status == 429:
        return LLMRateLimitError(
            message,
            error_type="rate_limit",
            retry_after=_retry_after(error),
            **kwargs
        )
    if status == 404:
        return LLMModelNotFoundError(message, error_type="model_not_found", **kwargs)
    if status == 408 or "timeout" in error.__class__.__name__.lower():
        return LLMTimeoutError(message, error_type="timeout", **kwargs)
    if status in (400, 422):
        return LLMValidationError(message, error_type="validation", **kwargs)
    return LLMAPIError(message, error_type="api_error", **kwargs)


def _retry_after(error: Exception) -> Optional[int]:
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None) or {}
    value = headers.get("retry-after") if hasattr(headers, "get") else None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
