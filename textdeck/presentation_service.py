"""High level workflow tying generation, storage and rendering together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from LLM_API.base import CallModel
from LLM_API.exceptions import LLMError
from LLM_API.providers import create_model

from .config import DeckSettings
from .deck_assembler import assemble_document
from .exceptions import (
    DeckValidationError,
    PresentationNotFoundError,
    ProviderError,
)
from .marp_renderer import MarpRenderer
from .presentation_store import InMemoryPresentationStore
from .slide_generation import (
    DEFAULT_SLIDE_COUNT_OPTION,
    GenerationContext,
    SlideContentGenerator,
)
from .slide_models import DEFAULT_STYLE, PresentationRecord, StyleDescriptor
from .slide_ranges import select_slides
from .template_analyzer import TemplateAnalyzer

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Generated Presentation"

MIME_TYPES: Dict[str, str] = {
    "html": "text/html",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "pdf": "application/pdf",
}

ModelFactory = Callable[..., CallModel]


@dataclass
class GenerationRequest:
    """Everything a caller supplies to create one presentation."""

    content: str
    llm_provider: str
    model: str
    api_key: str
    guidance: Optional[str] = None
    slide_count_option: str = DEFAULT_SLIDE_COUNT_OPTION
    template: Optional[bytes] = None


@dataclass
class GenerationResult:
    presentation: PresentationRecord
    html_preview: Optional[str] = None


@dataclass
class Download:
    data: bytes
    filename: str
    mime_type: str


class PresentationService:
    """Generate, store, preview and export presentations."""

    def __init__(
        self,
        store: Optional[InMemoryPresentationStore] = None,
        renderer: Optional[MarpRenderer] = None,
        model_factory: ModelFactory = create_model,
        template_analyzer: Optional[TemplateAnalyzer] = None,
        settings: Optional[DeckSettings] = None,
    ) -> None:
        self.settings = settings or (renderer.settings if renderer else DeckSettings())
        self.store = store if store is not None else InMemoryPresentationStore()
        self.renderer = renderer or MarpRenderer(self.settings)
        self.model_factory = model_factory
        self.template_analyzer = template_analyzer or TemplateAnalyzer()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate(
        self, request: GenerationRequest, *, with_preview: bool = False
    ) -> GenerationResult:
        """Run the full text to presentation workflow and store the result.

        ``with_preview`` additionally renders the HTML preview; a render
        failure there propagates like any other render error.
        """

        self._validate(request)
        style = self._resolve_style(request.template)

        try:
            llm_client = self.model_factory(
                request.llm_provider,
                api_key=request.api_key,
                model_name=request.model,
            )
        except LLMError as exc:
            raise ProviderError(
                exc.message, provider=request.llm_provider, original_error=exc
            ) from exc

        slides = SlideContentGenerator(llm_client).generate_slides(
            GenerationContext(
                content=request.content,
                guidance=request.guidance or None,
                slide_count_option=request.slide_count_option or DEFAULT_SLIDE_COUNT_OPTION,
            )
        )
        title = (slides[0].title if slides else "") or DEFAULT_TITLE
        document = assemble_document(slides, style, title)

        record = self.store.create(
            PresentationRecord(
                title=title,
                content=request.content,
                guidance=request.guidance or None,
                llm_provider=request.llm_provider,
                model=request.model,
                slide_count=len(slides),
                template_styles=style if request.template else None,
                document=document,
                slides=list(slides),
            )
        )
        LOGGER.info(
            "Generated presentation %s with %d slides using %s/%s",
            record.id,
            record.slide_count,
            record.llm_provider,
            record.model,
        )

        html = self.renderer.render_html(document) if with_preview else None
        return GenerationResult(presentation=record, html_preview=html)

    # ------------------------------------------------------------------
    # Retrieval and export
    # ------------------------------------------------------------------
    def get(self, presentation_id: str) -> PresentationRecord:
        record = self.store.get(presentation_id)
        if record is None:
            raise PresentationNotFoundError(presentation_id)
        return record

    def list_recent(self, limit: int = 10) -> List[PresentationRecord]:
        return self.store.list(limit)

    def delete(self, presentation_id: str) -> None:
        if not self.store.delete(presentation_id):
            raise PresentationNotFoundError(presentation_id)

    def preview_html(self, presentation_id: str) -> str:
        return self.renderer.render_html(self.get(presentation_id).document)

    def download(
        self,
        presentation_id: str,
        fmt: str,
        slide_ranges: Optional[str] = None,
    ) -> Download:
        """Export a stored presentation, optionally limited to ``slide_ranges``.

        An empty or entirely malformed range expression exports every slide.
        """

        fmt = (fmt or "").lower()
        if fmt not in MIME_TYPES:
            raise DeckValidationError(f"Unsupported export format: {fmt or 'none'}")

        record = self.get(presentation_id)
        document = select_slides(record.document, slide_ranges)
        if fmt == "html":
            data = self.renderer.render_html(document).encode("utf-8")
        elif fmt == "pptx":
            data = self.renderer.render_pptx(document)
        else:
            data = self.renderer.render_pdf(document)

        return Download(
            data=data,
            filename=f"{_safe_filename(record.title)}.{fmt}",
            mime_type=MIME_TYPES[fmt],
        )

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------
    def environment_info(self) -> Dict[str, bool]:
        return {
            "is_serverless": self.settings.is_serverless,
            "supports_file_generation": self.renderer.can_render_binary,
        }

    def health(self) -> Dict[str, str]:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _validate(self, request: GenerationRequest) -> None:
        required = {
            "content": request.content,
            "llm_provider": request.llm_provider,
            "model": request.model,
            "api_key": request.api_key,
        }
        missing = [name for name, value in required.items() if not (value or "").strip()]
        if missing:
            raise DeckValidationError(f"Missing required fields: {', '.join(missing)}")

    def _resolve_style(self, template: Optional[bytes]) -> StyleDescriptor:
        if not template:
            return DEFAULT_STYLE
        return self.template_analyzer.analyze(template)


def _safe_filename(title: str) -> str:
    cleaned = "".join("_" if char in '/\\:*?"<>|' else char for char in title).strip()
    return cleaned or DEFAULT_TITLE
