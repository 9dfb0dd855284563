"""Abstract base class that normalises the provider interface."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Optional

from .converters import strip_code_fences
from .data_classes import (
    BaseRequest,
    BaseResponse,
    JSONRequest,
    JSONResponse,
    ProviderConfig,
)


class CallModel(ABC):
    """Abstract base class for all LLM providers."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key
        self.model_name = model_name
        self.client = None
        self.provider_config = self._get_provider_config()
        self.setup_client()

    @abstractmethod
    def setup_client(self) -> None:
        """Initialise the provider client."""

    @abstractmethod
    def _get_provider_config(self) -> ProviderConfig:
        """Return provider specific configuration metadata."""

    # ------------------------------------------------------------------
    # Core API methods that providers must implement
    # ------------------------------------------------------------------
    @abstractmethod
    def generate_content(self, request: BaseRequest) -> BaseResponse:
        """Generate basic text content."""

    @abstractmethod
    def complete_json(self, request: JSONRequest) -> JSONResponse:
        """Return a completion whose text is a JSON document."""

    # ------------------------------------------------------------------
    # Utility helpers
    # ------------------------------------------------------------------
    def get_provider_name(self) -> str:
        """Return the provider name."""

        return self.provider_config.provider_name

    def supports_feature(self, feature: str) -> bool:
        """Check if provider supports a specific feature."""

        feature_map = {
            "json_mode": self.provider_config.supports_json_mode,
        }
        return feature_map.get(feature, False)

    def _json_response(self, text: str, request: JSONRequest, **kwargs) -> JSONResponse:
        """Wrap ``text`` in a :class:`JSONResponse`, recording parse failures."""

        parsed = None
        validation_error = None
        try:
            parsed = json.loads(strip_code_fences(text)) if text else None
        except json.JSONDecodeError as exc:
            validation_error = f"Response is not valid JSON: {exc}"
        if parsed is None and validation_error is None:
            validation_error = "Empty response"
        return JSONResponse(
            text=text,
            parsed_output=parsed,
            validation_error=validation_error,
            model_used=request.model_name or self.model_name,
            **kwargs,
        )
