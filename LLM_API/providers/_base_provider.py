import os
from typing import Any, Callable
from dotenv import load_dotenv
from ..base import CallModel
from ..data_classes import BaseRequest
from ..exceptions import LLMAuthenticationError, LLMValidationError, classify_provider_error


class BaseProvider(CallModel):
    """Base class with common provider functionality"""

    def _get_api_key(self, env_var_name: str) -> str:
        """Get API key from environment or instance variable"""
        load_dotenv()
        api_key = self.api_key or os.getenv(env_var_name)

        if not api_key:
            raise LLMAuthenticationError(
                message=f"API key required. Set {env_var_name} or pass api_key parameter",
                provider=self.provider_config.provider_name,
                error_type="missing_api_key"
            )

        return api_key

    def _validate_request(self, request: BaseRequest) -> None:
        """Common request validation"""
        if not request.prompt or not request.prompt.strip():
            raise LLMValidationError(
                message="Request must have a prompt",
                provider=self.provider_config.provider_name,
                error_type="empty_prompt"
            )

        limit = self.provider_config.max_tokens_limit
        if request.max_tokens and limit and request.max_tokens > limit:
            raise LLMValidationError(
                message=f"max_tokens exceeds limit: {limit}",
                provider=self.provider_config.provider_name,
                error_type="max_tokens"
            )

    def _call_sdk(self, func: Callable[..., Any], **params) -> Any:
        """Invoke an SDK method, translating its exceptions into LLMError"""
        try:
            return func(**params)
        except Exception as e:
            raise classify_provider_error(e, self.provider_config.provider_name) from e
