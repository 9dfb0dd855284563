import re
from typing import Any, Dict, Optional

_FENCE_PATTERN = re.compile(r"^\s*```[A-Za-z0-9_-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around a whole reply"""
    if not text:
        return ""
    match = _FENCE_PATTERN.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


class ClaudeConverter:
    """Convert Claude API responses to plain values"""

    @staticmethod
    def extract_text(response: Any) -> str:
        """Concatenate the text blocks of a Messages API response"""
        return "".join(
            getattr(block, "text", "")
            for block in getattr(response, "content", None) or []
            if getattr(block, "type", "") == "text"
        )

    @staticmethod
    def extract_usage(response: Any) -> Optional[Dict[str, int]]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        prompt_tokens = getattr(usage, "input_tokens", 0) or 0
        completion_tokens = getattr(usage, "output_tokens", 0) or 0
        return {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens
        }


class GeminiConverter:
    """Convert Gemini API responses to plain values"""

    @staticmethod
    def extract_text(response: Any) -> str:
        return getattr(response, "text", "") or ""

    @staticmethod
    def extract_usage(response: Any) -> Optional[Dict[str, int]]:
        metadata = getattr(response, "usage_metadata", None)
        if metadata is None:
            return None
        return {
            "prompt_tokens": getattr(metadata, "prompt_token_count", 0) or 0,
            "completion_tokens": getattr(metadata, "candidates_token_count", 0) or 0,
            "total_tokens": getattr(metadata, "total_token_count", 0) or 0
        }


class OpenAIConverter:
    """Convert OpenAI chat completion responses to plain values"""

    @staticmethod
    def extract_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", "") or ""

    @staticmethod
    def extract_usage(response: Any) -> Optional[Dict[str, int]]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        return {
            "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
            "total_tokens": getattr(usage, "total_tokens", 0) or 0
        }
