from dataclasses import dataclass
from typing import Optional, Dict, Any


# ========== Base Classes ==========

@dataclass
class BaseRequest:
    """Base class for every provider request"""
    prompt: str = ""
    model_name: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict (for API requests)"""
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class BaseResponse:
    """Base class for every provider response"""
    text: str = ""
    model_used: Optional[str] = None
    usage: Optional[Dict[str, int]] = None
    error: Optional[str] = None
    raw_response: Optional[Any] = None

    @property
    def success(self) -> bool:
        """Whether the request succeeded"""
        return self.error is None


# ========== JSON Completion ==========

@dataclass
class JSONRequest(BaseRequest):
    """Request for a completion that must be a JSON document"""
    system_prompt: Optional[str] = None


@dataclass
class JSONResponse(BaseResponse):
    """JSON completion response"""
    parsed_output: Optional[Any] = None
    validation_error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Whether the reply arrived and parsed as JSON"""
        return self.error is None and self.validation_error is None and self.parsed_output is not None


# ========== Provider Metadata ==========

@dataclass
class ProviderConfig:
    """Provider specific settings"""
    provider_name: str = ""
    model_name: str = ""
    api_key_env: str = ""
    supports_json_mode: bool = True

    # Provider specific limits
    max_tokens_limit: Optional[int] = None
    default_max_tokens: Optional[int] = None


# ========== Utility Functions ==========

def create_json_request(
    prompt: str,
    system_prompt: Optional[str] = None,
    **kwargs
) -> JSONRequest:
    """Convenience constructor for JSON completion requests"""
    return JSONRequest(
        prompt=prompt,
        system_prompt=system_prompt,
        **kwargs
    )
