from typing import Optional, Dict, Any
from google import genai
from google.genai import types
from ..converters import GeminiConverter
from ..data_classes import (
    BaseRequest, BaseResponse,
    JSONRequest, JSONResponse,
    ProviderConfig
)
from ..decorators import log_request, with_retry
from ..exceptions import LLMError, LLMRateLimitError, LLMTimeoutError
from ._base_provider import BaseProvider


class GeminiModel(BaseProvider):
    """Gemini API implementation of CallModel"""

    def __init__(self, api_key: Optional[str] = None, model_name: str = "gemini-2.5-flash"):
        super().__init__(api_key=api_key, model_name=model_name)

    def _get_provider_config(self) -> ProviderConfig:
        """Get Gemini provider configuration"""
        return ProviderConfig(
            provider_name="Gemini",
            model_name=self.model_name or "gemini-2.5-flash",
            api_key_env="GEMINI_API_KEY",
            supports_json_mode=True,
            max_tokens_limit=65536,
        )

    def setup_client(self):
        """Setup Gemini client"""
        self.client = genai.Client(api_key=self._get_api_key("GEMINI_API_KEY"))

    @log_request
    def generate_content(self, request: BaseRequest) -> BaseResponse:
        """Generate plain text"""
        model = request.model_name or self.model_name
        try:
            self._validate_request(request)
            response = self._generate(
                model=model,
                contents=request.prompt,
                config=types.GenerateContentConfig(**self._config_kwargs(request))
            )
            return BaseResponse(
                text=GeminiConverter.extract_text(response),
                model_used=model,
                usage=GeminiConverter.extract_usage(response),
                raw_response=response
            )
        except LLMError as e:
            return BaseResponse(text="", model_used=model, error=str(e))

    @log_request
    def complete_json(self, request: JSONRequest) -> JSONResponse:
        """Generate a reply with the JSON response MIME type"""
        model = request.model_name or self.model_name
        try:
            self._validate_request(request)
            config_kwargs = self._config_kwargs(request)
            config_kwargs["response_mime_type"] = "application/json"
            if request.system_prompt:
                config_kwargs["system_instruction"] = request.system_prompt
            response = self._generate(
                model=model,
                contents=request.prompt,
                config=types.GenerateContentConfig(**config_kwargs)
            )
            return self._json_response(
                GeminiConverter.extract_text(response),
                request,
                usage=GeminiConverter.extract_usage(response),
                raw_response=response
            )
        except LLMError as e:
            return JSONResponse(text="", model_used=model, error=str(e))

    @with_retry(max_attempts=3, delay=1.0, exceptions=(LLMRateLimitError, LLMTimeoutError))
    def _generate(self, **params):
        return self._call_sdk(self.client.models.generate_content, **params)

    def _config_kwargs(self, request: BaseRequest) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.max_tokens:
            kwargs["max_output_tokens"] = request.max_tokens
        return kwargs
