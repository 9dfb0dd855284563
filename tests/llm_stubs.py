"""Helper stubs for simulating provider replies in tests."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from LLM_API.data_classes import BaseResponse, JSONRequest, JSONResponse


class StubJSONLLM:
    """LLM stub that answers every JSON request with a predefined payload."""

    model_name = "stub-json"

    def __init__(
        self,
        payload: Any = None,
        *,
        text: Optional[str] = None,
        error: Optional[str] = None,
        provider_name: str = "stub",
    ) -> None:
        self.payload = payload
        self.text = text
        self.error = error
        self.provider_name = provider_name
        self.requests: List[JSONRequest] = []

    def get_provider_name(self) -> str:
        return self.provider_name

    def generate_content(self, request: Any) -> BaseResponse:
        return BaseResponse(text="stub text", model_used=self.model_name)

    def complete_json(self, request: JSONRequest) -> JSONResponse:
        self.requests.append(request)
        if self.error:
            return JSONResponse(text="", model_used=self.model_name, error=self.error)
        text = self.text
        if text is None:
            text = json.dumps(self.payload, ensure_ascii=False)
        return JSONResponse(
            text=text,
            parsed_output=self.payload,
            model_used=self.model_name,
        )


def slide_payload(titles: Iterable[str]) -> List[Dict[str, Any]]:
    """Build a slide array with one bullet per title."""

    return [
        {
            "title": title,
            "content": f"- Point about {title}",
            "layout": "content",
            "notes": f"Talk about {title}",
        }
        for title in titles
    ]


class RecordingFactory:
    """Model factory that hands out a fixed client and records its arguments."""

    def __init__(self, client: Any) -> None:
        self.client = client
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, provider: str, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.calls.append({"provider": provider, "api_key": api_key, "model_name": model_name})
        return self.client


__all__ = ["RecordingFactory", "StubJSONLLM", "slide_payload"]
