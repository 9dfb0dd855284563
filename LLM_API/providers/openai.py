from typing import Optional, Dict, Any, List
from openai import OpenAI
from ..converters import OpenAIConverter
from ..data_classes import (
    BaseRequest, BaseResponse,
    JSONRequest, JSONResponse,
    ProviderConfig
)
from ..decorators import log_request, with_retry
from ..exceptions import LLMError, LLMRateLimitError, LLMTimeoutError
from ._base_provider import BaseProvider

# Reasoning models only accept the default temperature.
_FIXED_TEMPERATURE_PREFIXES = ("gpt-5", "o1", "o3", "o4")


class OpenAIModel(BaseProvider):
    """OpenAI chat completions implementation of CallModel"""

    def __init__(self, api_key: Optional[str] = None, model_name: str = "gpt-5"):
        super().__init__(api_key=api_key, model_name=model_name)

    def _get_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            provider_name="OpenAI",
            model_name=self.model_name,
            api_key_env="OPENAI_API_KEY",
            supports_json_mode=True,
            max_tokens_limit=128000,
        )

    def setup_client(self):
        self.client = OpenAI(api_key=self._get_api_key("OPENAI_API_KEY"))

    @log_request
    def generate_content(self, request: BaseRequest) -> BaseResponse:
        model = request.model_name or self.model_name
        try:
            self._validate_request(request)
            response = self._create_completion(
                **self._build_params(request, [{"role": "user", "content": request.prompt}])
            )
            return BaseResponse(
                text=OpenAIConverter.extract_text(response),
                model_used=model,
                usage=OpenAIConverter.extract_usage(response),
                raw_response=response
            )
        except LLMError as e:
            return BaseResponse(text="", model_used=model, error=str(e))

    @log_request
    def complete_json(self, request: JSONRequest) -> JSONResponse:
        model = request.model_name or self.model_name
        messages: List[Dict[str, str]] = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})
        try:
            self._validate_request(request)
            params = self._build_params(request, messages)
            params["response_format"] = {"type": "json_object"}
            response = self._create_completion(**params)
            return self._json_response(
                OpenAIConverter.extract_text(response),
                request,
                usage=OpenAIConverter.extract_usage(response),
                raw_response=response
            )
        except LLMError as e:
            return JSONResponse(text="", model_used=model, error=str(e))

    @with_retry(max_attempts=3, delay=1.0, exceptions=(LLMRateLimitError, LLMTimeoutError))
    def _create_completion(self, **params):
        return self._call_sdk(self.client.chat.completions.create, **params)

    def _build_params(self, request: BaseRequest, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        model = request.model_name or self.model_name
        params: Dict[str, Any] = {"model": model, "messages": messages}
        if request.temperature is not None and not model.startswith(_FIXED_TEMPERATURE_PREFIXES):
            params["temperature"] = request.temperature
        if request.max_tokens:
            params["max_completion_tokens"] = request.max_tokens
        return params
