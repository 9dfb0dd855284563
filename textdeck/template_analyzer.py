"""Extract colours, fonts and layouts from PowerPoint templates."""

from __future__ import annotations

import io
import logging
import zipfile
from typing import Dict, List, Optional

from lxml import etree
from pptx import Presentation
from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from .exceptions import DeckValidationError, TemplateAnalysisError
from .slide_models import DEFAULT_STYLE, StyleColors, StyleDescriptor, StyleFonts

LOGGER = logging.getLogger(__name__)

MAX_TEMPLATE_BYTES = 50 * 1024 * 1024

PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
POTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.template"
ALLOWED_TEMPLATE_TYPES = (PPTX_MIME_TYPE, POTX_MIME_TYPE)

_DRAWINGML_NS = {"a": "http://schemas.openxmlformats.org/drawingml/2006/main"}
_TEMPLATE_MAIN = "presentationml.template.main+xml"
_PRESENTATION_MAIN = "presentationml.presentation.main+xml"

# Theme slot feeding each descriptor colour.
_COLOR_SLOTS = {
    "primary": "accent1",
    "secondary": "accent2",
    "background": "lt1",
    "text": "dk1",
}


def validate_template_upload(
    filename: Optional[str], mime_type: Optional[str], size: int
) -> None:
    """Reject uploads that are not .pptx/.potx files or exceed 50 MB."""

    if mime_type not in ALLOWED_TEMPLATE_TYPES:
        raise DeckValidationError(
            "Invalid file type. Only .pptx and .potx files are allowed."
        )
    if size > MAX_TEMPLATE_BYTES:
        raise DeckValidationError(
            f"Template '{filename or 'upload'}' exceeds the 50MB limit"
        )


class TemplateAnalyzer:
    """Derive a :class:`StyleDescriptor` from a .pptx or .potx template."""

    def __init__(self, fallback: StyleDescriptor = DEFAULT_STYLE) -> None:
        self.fallback = fallback

    def analyze(self, data: bytes) -> StyleDescriptor:
        try:
            presentation = Presentation(io.BytesIO(_as_presentation_package(data)))
            theme = self._load_theme(presentation)
        except Exception as exc:
            LOGGER.warning("Template analysis failed: %s", exc)
            raise TemplateAnalysisError(original_error=exc) from exc

        colors = self._theme_colors(theme)
        fonts = self._theme_fonts(theme)
        style = StyleDescriptor(
            colors=StyleColors(
                **{
                    role: colors.get(slot, getattr(self.fallback.colors, role))
                    for role, slot in _COLOR_SLOTS.items()
                }
            ),
            fonts=StyleFonts(
                title=fonts.get("major", self.fallback.fonts.title),
                body=fonts.get("minor", self.fallback.fonts.body),
            ),
            layouts=tuple(layout.name for layout in presentation.slide_layouts)
            or self.fallback.layouts,
            images=tuple(_media_parts(presentation)),
        )
        LOGGER.info(
            "Analyzed template: %d layouts, %d media parts",
            len(style.layouts),
            len(style.images),
        )
        return style

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load_theme(self, presentation):
        master_part = presentation.slide_master.part
        try:
            theme_part = master_part.part_related_by(RT.THEME)
        except KeyError:
            LOGGER.debug("Template has no theme part; using fallback style")
            return None
        return etree.fromstring(theme_part.blob)

    def _theme_colors(self, theme) -> Dict[str, str]:
        if theme is None:
            return {}
        colors: Dict[str, str] = {}
        for slot in _COLOR_SLOTS.values():
            matches = theme.xpath(
                f"./a:themeElements/a:clrScheme/a:{slot}", namespaces=_DRAWINGML_NS
            )
            if not matches:
                continue
            value = _color_value(matches[0])
            if value:
                colors[slot] = value
        return colors

    def _theme_fonts(self, theme) -> Dict[str, str]:
        if theme is None:
            return {}
        fonts: Dict[str, str] = {}
        for kind in ("major", "minor"):
            typefaces = theme.xpath(
                f"./a:themeElements/a:fontScheme/a:{kind}Font/a:latin/@typeface",
                namespaces=_DRAWINGML_NS,
            )
            if typefaces and typefaces[0]:
                fonts[kind] = f'"{typefaces[0]}", sans-serif'
        return fonts


# ----------------------------------------------------------------------
# Helper functions
# ----------------------------------------------------------------------

def _color_value(element) -> Optional[str]:
    for child in element:
        if not isinstance(child.tag, str):
            continue
        tag = child.tag.rsplit("}", 1)[-1]
        if tag == "srgbClr" and child.get("val"):
            return f"#{child.get('val').lower()}"
        if tag == "sysClr" and child.get("lastClr"):
            return f"#{child.get('lastClr').lower()}"
    return None


def _media_parts(presentation) -> List[str]:
    return sorted(
        str(part.partname)
        for part in presentation.part.package.iter_parts()
        if str(part.partname).startswith("/ppt/media/")
    )


def _as_presentation_package(data: bytes) -> bytes:
    """Return ``data`` with a .potx main part relabelled as a presentation."""

    with zipfile.ZipFile(io.BytesIO(data)) as source:
        content_types = source.read("[Content_Types].xml").decode("utf-8")
        if _TEMPLATE_MAIN not in content_types:
            return data
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
            for item in source.infolist():
                payload = source.read(item.filename)
                if item.filename == "[Content_Types].xml":
                    payload = content_types.replace(
                        _TEMPLATE_MAIN, _PRESENTATION_MAIN
                    ).encode("utf-8")
                target.writestr(item, payload)
    return buffer.getvalue()
