"""
LLM API Package - Unified JSON completion interface for multiple LLM providers
"""

from .base import CallModel
from .data_classes import (
    BaseRequest, BaseResponse,
    JSONRequest, JSONResponse,
    ProviderConfig,
    create_json_request
)
from .exceptions import (
    LLMError, LLMAPIError, LLMValidationError,
    LLMRateLimitError, LLMAuthenticationError,
    LLMTimeoutError, LLMModelNotFoundError,
    LLMInsufficientQuotaError,
    classify_provider_error
)
from .providers import (
    ClaudeModel, GeminiModel, OpenAIModel,
    PROVIDER_CLASSES, PROVIDER_MODELS, create_model
)

__version__ = "1.1.0"
__all__ = [
    # Base
    'CallModel',
    # Data Classes
    'BaseRequest', 'BaseResponse',
    'JSONRequest', 'JSONResponse',
    'ProviderConfig', 'create_json_request',
    # Exceptions
    'LLMError', 'LLMAPIError', 'LLMValidationError',
    'LLMRateLimitError', 'LLMAuthenticationError',
    'LLMTimeoutError', 'LLMModelNotFoundError',
    'LLMInsufficientQuotaError', 'classify_provider_error',
    # Providers
    'ClaudeModel', 'GeminiModel', 'OpenAIModel',
    'PROVIDER_CLASSES', 'PROVIDER_MODELS', 'create_model'
]
