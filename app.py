"""Streamlit UI for turning text into Marp presentations."""

from __future__ import annotations

import json
import logging
import textwrap
from typing import Any, Dict, List, Optional

import streamlit as st
import streamlit.components.v1 as components

from LLM_API.data_classes import BaseResponse, JSONRequest, JSONResponse
from LLM_API.providers import PROVIDER_MODELS, create_model

from textdeck.config import DeckSettings
from textdeck.exceptions import DeckError
from textdeck.marp_renderer import MarpRenderer
from textdeck.presentation_service import GenerationRequest, PresentationService
from textdeck.slide_generation import SLIDE_COUNT_LABELS, DEFAULT_SLIDE_COUNT_OPTION
from textdeck.slide_ranges import parse_slide_ranges_report
from textdeck.template_analyzer import validate_template_upload

LOGGER = logging.getLogger(__name__)

STUB_PROVIDER = "stub"
STUB_API_KEY = "offline-demo"

PROVIDER_LABELS = {
    STUB_PROVIDER: "Offline demo (stub)",
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "gemini": "Google Gemini",
}


def _extract_content_excerpt(prompt: str) -> str:
    """Return the user content embedded in a slide generation ``prompt``."""

    if not prompt:
        return ""
    marker = "Content:\n"
    section = prompt.split(marker, 1)[1] if marker in prompt else prompt
    for terminator in ("\n\nGuidance:", "\n\nPlease structure"):
        section = section.split(terminator, 1)[0]
    return section.strip()


class StubSlideLLM:
    """Offline stand-in for a provider: one slide per paragraph of input."""

    model_name = "stub-slides"

    def __init__(self, *, max_slides: int = 8) -> None:
        self.max_slides = max_slides

    def get_provider_name(self) -> str:
        return STUB_PROVIDER

    # ------------------------------------------------------------------
    # LLM compatible interface
    # ------------------------------------------------------------------
    def generate_content(self, request) -> BaseResponse:
        excerpt = textwrap.shorten(
            _extract_content_excerpt(getattr(request, "prompt", "")) or "No input",
            width=80,
            placeholder="…",
        )
        return BaseResponse(text=excerpt, model_used=self.model_name)

    def complete_json(self, request: JSONRequest) -> JSONResponse:
        content = _extract_content_excerpt(request.prompt)
        paragraphs = [part.strip() for part in content.split("\n\n") if part.strip()]
        slides: List[Dict[str, Any]] = []
        for index, paragraph in enumerate(paragraphs[: self.max_slides], start=1):
            lines = [line.strip() for line in paragraph.splitlines() if line.strip()]
            title = textwrap.shorten(lines[0], width=60, placeholder="…")
            body = lines[1:] or [lines[0]]
            slides.append(
                {
                    "title": title,
                    "content": "\n".join(f"- {line}" for line in body),
                    "layout": "title" if index == 1 else "content",
                    "notes": f"Generated offline from paragraph {index}",
                }
            )
        if not slides:
            slides.append(
                {"title": "Empty input", "content": "- Nothing to summarise", "layout": "title"}
            )
        return JSONResponse(
            text=json.dumps(slides, ensure_ascii=False),
            parsed_output=slides,
            model_used=self.model_name,
        )


def build_model(provider: str, api_key: Optional[str] = None, model_name: Optional[str] = None):
    """Model factory that adds the offline stub to the provider registry."""

    if provider == STUB_PROVIDER:
        return StubSlideLLM()
    return create_model(provider, api_key=api_key, model_name=model_name)


@st.cache_resource(show_spinner=False)
def load_resources() -> PresentationService:
    """Create the shared presentation service for this Streamlit process."""

    settings = DeckSettings.from_env()
    return PresentationService(
        renderer=MarpRenderer(settings),
        model_factory=build_model,
        settings=settings,
    )


def _render_sidebar() -> Dict[str, Any]:
    with st.sidebar:
        st.header("Generation settings")
        provider = st.selectbox(
            "LLM provider",
            list(PROVIDER_LABELS),
            format_func=PROVIDER_LABELS.get,
            index=0,
        )
        if provider == STUB_PROVIDER:
            model = StubSlideLLM.model_name
            api_key = STUB_API_KEY
            st.caption("The offline demo needs no API key.")
        else:
            model = st.selectbox("Model", PROVIDER_MODELS[provider], index=0)
            api_key = st.text_input(
                "API key",
                type="password",
                help="The key is only used for this request and is never stored.",
            )
        slide_count = st.selectbox(
            "Number of slides",
            list(SLIDE_COUNT_LABELS),
            format_func=SLIDE_COUNT_LABELS.get,
            index=list(SLIDE_COUNT_LABELS).index(DEFAULT_SLIDE_COUNT_OPTION),
        )
        template = st.file_uploader(
            "PowerPoint template (optional)",
            type=["pptx", "potx"],
            help="Colours and fonts are taken from the template theme. Max 50MB.",
        )
    return {
        "provider": provider,
        "model": model,
        "api_key": api_key,
        "slide_count": slide_count,
        "template": template,
    }


def _read_template(upload) -> Optional[bytes]:
    if upload is None:
        return None
    data = upload.getvalue()
    validate_template_upload(upload.name, upload.type, len(data))
    return data


def _render_downloads(service: PresentationService, presentation_id: str) -> None:
    st.markdown("#### Export")
    expression = st.text_input(
        "Slide ranges (optional)",
        placeholder="e.g. 1-3, 5, 7-9",
        help="Leave empty to export every slide.",
    )
    report = parse_slide_ranges_report(expression)
    if report.has_dropped_tokens:
        st.warning("Ignored invalid ranges: " + ", ".join(report.dropped_tokens))
    if expression.strip() and not report.ranges:
        st.info("No valid range given; every slide will be exported.")

    can_render_binary = service.renderer.can_render_binary
    if not can_render_binary:
        st.info(
            "PPTX and PDF export is unavailable in this deployment. "
            "Run the app locally with the Marp CLI to enable it."
        )

    columns = st.columns(3)
    for column, fmt in zip(columns, ("html", "pptx", "pdf")):
        with column:
            binary = fmt != "html"
            if st.button(
                f"Prepare {fmt.upper()}",
                key=f"prepare_{fmt}",
                disabled=binary and not can_render_binary,
            ):
                try:
                    download = service.download(presentation_id, fmt, expression)
                except DeckError as exc:
                    st.error(f"{fmt.upper()} export failed: {exc.message}")
                    LOGGER.warning("Export failed: %s", exc)
                else:
                    st.download_button(
                        f"Download {download.filename}",
                        data=download.data,
                        file_name=download.filename,
                        mime=download.mime_type,
                        key=f"download_{fmt}",
                    )


def _render_recent(service: PresentationService) -> None:
    recent = service.list_recent()
    st.subheader("Recent presentations")
    if not recent:
        st.caption("No presentations generated yet.")
        return
    for record in recent:
        columns = st.columns([4, 2, 1, 1])
        columns[0].markdown(f"**{record.title}**")
        columns[1].caption(
            f"{record.slide_count} slides · {record.llm_provider}/{record.model}"
        )
        if columns[2].button("Open", key=f"open_{record.id}"):
            st.session_state["presentation_id"] = record.id
        if columns[3].button("Delete", key=f"delete_{record.id}"):
            service.delete(record.id)
            if st.session_state.get("presentation_id") == record.id:
                st.session_state["presentation_id"] = None
            st.rerun()


def main() -> None:
    st.set_page_config(page_title="textdeck", layout="wide")
    st.title("textdeck")
    st.caption("Turn any text into a presentation.")

    service = load_resources()
    st.session_state.setdefault("presentation_id", None)
    options = _render_sidebar()

    content = st.text_area(
        "Content",
        height=240,
        placeholder="Paste an article, notes or a report to turn into slides",
    )
    guidance = st.text_input(
        "Guidance (optional)",
        placeholder="e.g. an investor pitch with a short agenda",
    )

    if st.button("Generate presentation", type="primary"):
        try:
            template = _read_template(options["template"])
            with st.spinner("Generating slides…"):
                result = service.generate(
                    GenerationRequest(
                        content=content,
                        guidance=guidance or None,
                        llm_provider=options["provider"],
                        model=options["model"],
                        api_key=options["api_key"],
                        slide_count_option=options["slide_count"],
                        template=template,
                    )
                )
            st.session_state["presentation_id"] = result.presentation.id
            st.success(f"Generated {result.presentation.slide_count} slides.")
        except DeckError as exc:
            st.error(exc.message)
            LOGGER.warning("Generation failed: %s", exc)

    presentation_id = st.session_state.get("presentation_id")
    if presentation_id and service.store.get(presentation_id) is not None:
        record = service.get(presentation_id)
        st.divider()
        st.subheader(record.title)
        preview_tab, source_tab = st.tabs(["Preview", "Marp markdown"])
        with preview_tab:
            try:
                components.html(service.preview_html(presentation_id), height=600, scrolling=True)
            except DeckError as exc:
                st.warning("The HTML preview could not be rendered.")
                st.text(str(exc))
        with source_tab:
            st.code(record.marp_content, language="markdown")
        _render_downloads(service, presentation_id)

    st.divider()
    _render_recent(service)


if __name__ == "__main__":  # pragma: no cover - Streamlit handles execution
    main()
