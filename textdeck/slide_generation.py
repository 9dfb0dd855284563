"""Turn free-form text into slides through a JSON-capable LLM provider."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from LLM_API.converters import strip_code_fences
from LLM_API.data_classes import JSONRequest, JSONResponse
from LLM_API.providers import create_model

from .exceptions import ProviderError
from .slide_models import Slide

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a presentation expert. Return only valid JSON arrays of slide objects."

DEFAULT_SLIDE_COUNT_OPTION = "automatic"

SLIDE_COUNT_INSTRUCTIONS: Dict[str, str] = {
    "2-5": "Create between 2-5 slides. Keep content concise and focused.",
    "5-10": "Create between 5-10 slides. Balance detail with brevity.",
    "10-20": "Create between 10-20 slides. Include detailed explanations and examples.",
    "20-30": "Create between 20-30 slides. Provide comprehensive coverage with detailed breakdowns.",
    "30-50": (
        "Create between 30-50 slides. Create an extensive, detailed presentation "
        "with thorough explanations."
    ),
    "automatic": "Create between 5-15 slides depending on content length and complexity.",
}

SLIDE_COUNT_LABELS: Dict[str, str] = {
    "2-5": "2-5 slides",
    "5-10": "5-10 slides",
    "10-20": "10-20 slides",
    "20-30": "20-30 slides",
    "30-50": "30-50 slides",
    "automatic": "Automatic",
}


@dataclass
class GenerationContext:
    """Input parameters that influence slide generation."""

    content: str
    guidance: Optional[str] = None
    slide_count_option: str = DEFAULT_SLIDE_COUNT_OPTION
    temperature: float = 0.7


def slide_count_instruction(option: Optional[str]) -> str:
    return SLIDE_COUNT_INSTRUCTIONS.get(
        option or DEFAULT_SLIDE_COUNT_OPTION,
        SLIDE_COUNT_INSTRUCTIONS[DEFAULT_SLIDE_COUNT_OPTION],
    )


class SlideContentGenerator:
    """Generate slide records via a JSON completion request."""

    def __init__(self, llm_client) -> None:
        self.llm_client = llm_client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def generate_slides(self, context: GenerationContext) -> List[Slide]:
        """Return the slides the provider derived from ``context.content``.

        Raises :class:`ProviderError` when the provider reports a failure or
        its reply is not a JSON array of slide objects (optionally wrapped in
        an object under ``"slides"``).
        """

        if self.llm_client is None:
            raise ProviderError("LLM client is required to generate slides")

        request = JSONRequest(
            prompt=self.build_prompt(context),
            system_prompt=SYSTEM_PROMPT,
            temperature=context.temperature,
        )
        response = self.llm_client.complete_json(request)
        payload = self._extract_parsed_output(response)
        slides = self._build_slides(payload)
        LOGGER.info("Generated %d slides with %s", len(slides), self._provider_name())
        return slides

    def build_prompt(self, context: GenerationContext) -> str:
        sections = [
            "Analyze the following text and break it down into slide content for a presentation.",
            "",
            "Content:",
            context.content,
            "",
        ]
        if context.guidance:
            sections.extend([f"Guidance: {context.guidance}", ""])
        sections.extend(
            [
                "Please structure the output as a JSON array of slide objects. Each slide should have:",
                "- title: The slide title",
                "- content: Main content points (markdown format)",
                "- layout: Suggested layout type (title, content, image, etc.)",
                "- notes: Optional speaker notes",
                "",
                "Ensure the slides flow logically and are appropriate for the content type and guidance provided.",
                slide_count_instruction(context.slide_count_option),
                "",
                "Return only the JSON array, no additional text.",
            ]
        )
        return "\n".join(sections)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _provider_name(self) -> str:
        getter = getattr(self.llm_client, "get_provider_name", None)
        if callable(getter):
            return getter()
        return self.llm_client.__class__.__name__

    def _extract_parsed_output(self, response: Optional[JSONResponse]) -> Any:
        provider = self._provider_name()
        if response is None:
            raise ProviderError("Provider returned no response", provider=provider)
        if response.error:
            raise ProviderError(response.error, provider=provider)
        if response.parsed_output is not None:
            return response.parsed_output
        if response.text:
            try:
                return json.loads(strip_code_fences(response.text))
            except json.JSONDecodeError as exc:
                LOGGER.debug("Failed to parse slide payload: %s", response.text)
                raise ProviderError(
                    "Provider response is not valid JSON",
                    provider=provider,
                    original_error=exc,
                ) from exc
        raise ProviderError("Provider returned an empty response", provider=provider)

    def _build_slides(self, payload: Any) -> List[Slide]:
        provider = self._provider_name()
        if isinstance(payload, dict):
            payload = payload.get("slides")
        if not isinstance(payload, list):
            raise ProviderError(
                "Provider response does not contain a slide array", provider=provider
            )

        slides: List[Slide] = []
        for position, raw in enumerate(payload, start=1):
            if not isinstance(raw, dict):
                raise ProviderError(
                    f"Slide {position} is not a JSON object", provider=provider
                )
            slides.append(Slide.from_dict(raw))
        return slides


def generate_slides(
    content: str,
    guidance: Optional[str],
    provider: str,
    model: str,
    api_key: str,
    slide_count_option: str = DEFAULT_SLIDE_COUNT_OPTION,
) -> List[Slide]:
    """Create the provider client for ``provider`` and generate slides."""

    llm_client = create_model(provider, api_key=api_key, model_name=model)
    generator = SlideContentGenerator(llm_client)
    return generator.generate_slides(
        GenerationContext(
            content=content,
            guidance=guidance,
            slide_count_option=slide_count_option,
        )
    )
