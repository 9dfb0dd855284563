import io
import zipfile

import pytest

pytest.importorskip("pptx")
from pptx import Presentation

from textdeck.exceptions import DeckValidationError, TemplateAnalysisError
from textdeck.slide_models import DEFAULT_STYLE
from textdeck.template_analyzer import (
    MAX_TEMPLATE_BYTES,
    POTX_MIME_TYPE,
    PPTX_MIME_TYPE,
    TemplateAnalyzer,
    validate_template_upload,
)


def _pptx_bytes():
    buffer = io.BytesIO()
    Presentation().save(buffer)
    return buffer.getvalue()


def _as_potx(data):
    source = zipfile.ZipFile(io.BytesIO(data))
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for item in source.infolist():
            payload = source.read(item.filename)
            if item.filename == "[Content_Types].xml":
                payload = payload.replace(
                    b"presentationml.presentation.main+xml",
                    b"presentationml.template.main+xml",
                )
            target.writestr(item, payload)
    return buffer.getvalue()


def _is_hex_colour(value):
    return (
        len(value) == 7
        and value.startswith("#")
        and value == value.lower()
        and all(char in "0123456789abcdef" for char in value[1:])
    )


def test_analyze_reads_theme_colours_fonts_and_layouts():
    style = TemplateAnalyzer().analyze(_pptx_bytes())

    colors = style.colors
    for value in (colors.primary, colors.secondary, colors.background, colors.text):
        assert _is_hex_colour(value)
    assert style.fonts.title.endswith(", sans-serif")
    assert style.fonts.body.endswith(", sans-serif")
    assert "Title Slide" in style.layouts
    assert style.images == ()


def test_analyze_accepts_potx_templates():
    pptx_style = TemplateAnalyzer().analyze(_pptx_bytes())

    potx_style = TemplateAnalyzer().analyze(_as_potx(_pptx_bytes()))

    assert potx_style == pptx_style


def test_analyze_rejects_non_presentation_bytes():
    with pytest.raises(TemplateAnalysisError) as excinfo:
        TemplateAnalyzer().analyze(b"definitely not a zip file")

    assert excinfo.value.message == "Failed to analyze PowerPoint template"
    assert excinfo.value.original_error is not None


def test_analyzer_keeps_fallback_for_missing_theme(monkeypatch):
    analyzer = TemplateAnalyzer()
    monkeypatch.setattr(analyzer, "_load_theme", lambda presentation: None)

    style = analyzer.analyze(_pptx_bytes())

    assert style.colors == DEFAULT_STYLE.colors
    assert style.fonts == DEFAULT_STYLE.fonts


@pytest.mark.parametrize("mime_type", [PPTX_MIME_TYPE, POTX_MIME_TYPE])
def test_validate_upload_accepts_presentations(mime_type):
    validate_template_upload("deck.pptx", mime_type, 1024)


def test_validate_upload_rejects_other_types():
    with pytest.raises(DeckValidationError, match="Invalid file type"):
        validate_template_upload("notes.txt", "text/plain", 10)


def test_validate_upload_rejects_large_files():
    with pytest.raises(DeckValidationError, match="50MB"):
        validate_template_upload("huge.pptx", PPTX_MIME_TYPE, MAX_TEMPLATE_BYTES + 1)
