"""Assemble generated slides into Marp documents and split them back apart."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .slide_models import (
    SLIDE_DELIMITER,
    DeckDocument,
    Slide,
    StyleDescriptor,
    serialize_blocks,
)

LOGGER = logging.getLogger(__name__)

THEME_NAME = "custom"
_FENCE_MARKERS = ("```", "~~~")


def build_theme_css(style: StyleDescriptor) -> str:
    """Return the CSS rules derived from ``style``.

    Values are substituted verbatim; a malformed colour or font ends up in
    the stylesheet unchanged.
    """

    colors = style.colors
    fonts = style.fonts
    return "\n".join(
        [
            "section {",
            f"  background: {colors.background};",
            f"  color: {colors.text};",
            f"  font-family: {fonts.body};",
            "}",
            "",
            "h1, h2, h3, h4, h5, h6 {",
            f"  color: {colors.primary};",
            f"  font-family: {fonts.title};",
            "}",
            "",
            "a {",
            f"  color: {colors.secondary};",
            "}",
            "",
            "blockquote {",
            f"  border-left: 4px solid {colors.primary};",
            "  background: rgba(0, 0, 0, 0.05);",
            "}",
        ]
    )


def build_header(style: StyleDescriptor, title: str) -> str:
    front_matter = "\n".join(
        [
            SLIDE_DELIMITER,
            "marp: true",
            f"theme: {THEME_NAME}",
            "paginate: true",
            f"title: {title}",
            SLIDE_DELIMITER,
        ]
    )
    return f"{front_matter}\n\n<style>\n{build_theme_css(style)}\n</style>"


def format_slide(slide: Slide) -> str:
    block = f"# {slide.title}\n\n{_close_open_fence(slide.content)}"
    if slide.notes:
        block += f"\n\n<!-- {slide.notes} -->"
    return block.strip()


def _close_open_fence(content: str) -> str:
    """Append a closing marker when ``content`` ends inside a code fence.

    An unclosed fence would swallow every following slide delimiter.
    """

    open_marker: Optional[str] = None
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith(_FENCE_MARKERS):
            open_marker = None if open_marker else stripped[:3]
    if open_marker is None:
        return content
    return f"{content.rstrip()}\n{open_marker}"


def assemble_document(
    slides: Sequence[Slide], style: StyleDescriptor, title: str
) -> DeckDocument:
    """Build a :class:`DeckDocument` from ``slides`` in input order."""

    document = DeckDocument(
        header=build_header(style, title),
        slides=tuple(format_slide(slide) for slide in slides),
    )
    LOGGER.debug("Assembled document '%s' with %d slides", title, document.slide_count)
    return document


def build_marp_markdown(
    slides: Sequence[Slide], style: StyleDescriptor, title: str
) -> str:
    return assemble_document(slides, style, title).to_markdown()


# ---------------------------------------------------------------------------
# Parsing serialized documents
# ---------------------------------------------------------------------------

def parse_document(text: Optional[str]) -> DeckDocument:
    """Split serialized Marp markdown into header and slide blocks.

    The header is the leading front matter plus a ``<style>`` element that
    directly follows it. The rest is split on lines holding only the
    delimiter, ignoring delimiter lines inside fenced code blocks. Blocks
    are trimmed and empty blocks dropped. Text without any structure yields
    an empty header-only document.
    """

    if not text or not text.strip():
        return DeckDocument()

    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    header_end = _header_length(lines)
    header = "\n".join(lines[:header_end]).strip()

    slides: List[str] = []
    current: List[str] = []
    in_fence = False
    for line in lines[header_end:]:
        stripped = line.strip()
        if stripped.startswith(_FENCE_MARKERS):
            in_fence = not in_fence
        if stripped == SLIDE_DELIMITER and not in_fence:
            slides.append("\n".join(current))
            current = []
            continue
        current.append(line)
    slides.append("\n".join(current))

    blocks = tuple(block.strip() for block in slides if block.strip())
    return DeckDocument(header=header, slides=blocks)


def split_blocks(text: Optional[str]) -> List[str]:
    """Return ``[header, *slide_blocks]`` for serialized markdown."""

    return parse_document(text).blocks()


def _header_length(lines: List[str]) -> int:
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index >= len(lines) or lines[index].strip() != SLIDE_DELIMITER:
        return 0

    closing = next(
        (
            pos
            for pos in range(index + 1, len(lines))
            if lines[pos].strip() == SLIDE_DELIMITER
        ),
        None,
    )
    if closing is None:
        LOGGER.debug("Front matter is not closed; treating the text as slides only")
        return 0
    end = closing + 1

    probe = end
    while probe < len(lines) and not lines[probe].strip():
        probe += 1
    if probe < len(lines) and lines[probe].lstrip().startswith("<style"):
        for pos in range(probe, len(lines)):
            if "</style>" in lines[pos]:
                return pos + 1
    return end


__all__ = [
    "THEME_NAME",
    "assemble_document",
    "build_header",
    "build_marp_markdown",
    "build_theme_css",
    "format_slide",
    "parse_document",
    "serialize_blocks",
    "split_blocks",
]
