"""
LLM Provider Implementations
"""

from typing import Dict, Optional, Tuple, Type

from ..base import CallModel
from ..exceptions import LLMValidationError
from .claude import ClaudeModel
from .gemini import GeminiModel
from .openai import OpenAIModel

PROVIDER_CLASSES: Dict[str, Type[CallModel]] = {
    "openai": OpenAIModel,
    "anthropic": ClaudeModel,
    "gemini": GeminiModel,
}

PROVIDER_MODELS: Dict[str, Tuple[str, ...]] = {
    "openai": ("gpt-5", "gpt-4-turbo", "gpt-4"),
    "anthropic": (
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-20241022",
        "claude-3-opus-20240229",
    ),
    "gemini": ("gemini-2.5-pro", "gemini-2.5-flash", "gemini-1.5-pro"),
}


def create_model(
    provider: str,
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
) -> CallModel:
    """Instantiate the provider registered under ``provider``.

    ``model_name`` defaults to the provider's first catalogued model.
    """
    key = (provider or "").strip().lower()
    model_cls = PROVIDER_CLASSES.get(key)
    if model_cls is None:
        raise LLMValidationError(
            message=f"Unsupported provider: {provider}",
            provider=provider or "",
            error_type="unsupported_provider"
        )
    return model_cls(api_key=api_key, model_name=model_name or PROVIDER_MODELS[key][0])


__all__ = [
    'ClaudeModel', 'GeminiModel', 'OpenAIModel',
    'PROVIDER_CLASSES', 'PROVIDER_MODELS', 'create_model'
]
