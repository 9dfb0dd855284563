"""Turn free-form text into Marp presentations and export them."""

from .config import DeckSettings, detect_serverless
from .deck_assembler import (
    assemble_document,
    build_header,
    build_marp_markdown,
    format_slide,
    parse_document,
    split_blocks,
)
from .exceptions import (
    DeckError,
    DeckValidationError,
    PresentationNotFoundError,
    ProviderError,
    RenderCapabilityError,
    RenderError,
    TemplateAnalysisError,
)
from .marp_renderer import MarpRenderer
from .presentation_service import (
    Download,
    GenerationRequest,
    GenerationResult,
    PresentationService,
)
from .presentation_store import InMemoryPresentationStore
from .slide_generation import GenerationContext, SlideContentGenerator, generate_slides
from .slide_models import (
    DEFAULT_STYLE,
    DeckDocument,
    PresentationRecord,
    Slide,
    SlideRange,
    StyleColors,
    StyleDescriptor,
    StyleFonts,
)
from .slide_ranges import (
    RangeParseResult,
    filter_document,
    filter_marp_markdown,
    parse_slide_ranges,
    parse_slide_ranges_report,
    select_slides,
)
from .template_analyzer import TemplateAnalyzer, validate_template_upload

__all__ = [
    "DeckSettings",
    "detect_serverless",
    "assemble_document",
    "build_header",
    "build_marp_markdown",
    "format_slide",
    "parse_document",
    "split_blocks",
    "DeckError",
    "DeckValidationError",
    "PresentationNotFoundError",
    "ProviderError",
    "RenderCapabilityError",
    "RenderError",
    "TemplateAnalysisError",
    "MarpRenderer",
    "Download",
    "GenerationRequest",
    "GenerationResult",
    "PresentationService",
    "InMemoryPresentationStore",
    "GenerationContext",
    "SlideContentGenerator",
    "generate_slides",
    "DEFAULT_STYLE",
    "DeckDocument",
    "PresentationRecord",
    "Slide",
    "SlideRange",
    "StyleColors",
    "StyleDescriptor",
    "StyleFonts",
    "RangeParseResult",
    "filter_document",
    "filter_marp_markdown",
    "parse_slide_ranges",
    "parse_slide_ranges_report",
    "select_slides",
    "TemplateAnalyzer",
    "validate_template_upload",
]
