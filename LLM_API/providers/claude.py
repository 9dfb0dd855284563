from typing import Optional, Dict, Any
import anthropic
from ..converters import ClaudeConverter
from ..data_classes import (
    BaseRequest, BaseResponse,
    JSONRequest, JSONResponse,
    ProviderConfig
)
from ..decorators import log_request, with_retry
from ..exceptions import LLMError, LLMRateLimitError, LLMTimeoutError
from ._base_provider import BaseProvider


class ClaudeModel(BaseProvider):
    """Anthropic Claude Messages API implementation of CallModel"""

    def __init__(self, api_key: Optional[str] = None, model_name: str = "claude-sonnet-4-20250514"):
        super().__init__(api_key=api_key, model_name=model_name)

    def _get_provider_config(self) -> ProviderConfig:
        """Get Claude provider configuration"""
        return ProviderConfig(
            provider_name="Claude",
            model_name=self.model_name or "claude-sonnet-4-20250514",
            api_key_env="ANTHROPIC_API_KEY",
            # No native JSON mode; the system prompt asks for raw JSON.
            supports_json_mode=False,
            max_tokens_limit=200000,
            default_max_tokens=4000,
        )

    def setup_client(self):
        """Setup Anthropic client"""
        self.client = anthropic.Anthropic(api_key=self._get_api_key("ANTHROPIC_API_KEY"))

    @log_request
    def generate_content(self, request: BaseRequest) -> BaseResponse:
        """Generate plain text"""
        model = request.model_name or self.model_name
        try:
            self._validate_request(request)
            response = self._create_message(**self._build_params(request))
            return BaseResponse(
                text=ClaudeConverter.extract_text(response),
                model_used=model,
                usage=ClaudeConverter.extract_usage(response),
                raw_response=response
            )
        except LLMError as e:
            return BaseResponse(text="", model_used=model, error=str(e))

    @log_request
    def complete_json(self, request: JSONRequest) -> JSONResponse:
        """Generate a JSON reply steered by the system prompt"""
        model = request.model_name or self.model_name
        try:
            self._validate_request(request)
            params = self._build_params(request)
            if request.system_prompt:
                params["system"] = request.system_prompt
            response = self._create_message(**params)
            return self._json_response(
                ClaudeConverter.extract_text(response),
                request,
                usage=ClaudeConverter.extract_usage(response),
                raw_response=response
            )
        except LLMError as e:
            return JSONResponse(text="", model_used=model, error=str(e))

    @with_retry(max_attempts=3, delay=1.0, exceptions=(LLMRateLimitError, LLMTimeoutError))
    def _create_message(self, **params):
        return self._call_sdk(self.client.messages.create, **params)

    def _build_params(self, request: BaseRequest) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": request.model_name or self.model_name,
            "max_tokens": request.max_tokens or self.provider_config.default_max_tokens,
            "messages": [{"role": "user", "content": request.prompt}]
        }
        if request.temperature is not None:
            params["temperature"] = request.temperature
        return params
