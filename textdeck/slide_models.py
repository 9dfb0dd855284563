"""Data models representing generated slides, styles and stored presentations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

SLIDE_DELIMITER = "---"


def serialize_blocks(header: str, slides: Sequence[str]) -> str:
    """Join a header and slide blocks into Marp markdown.

    The first slide follows the header after a blank line; every following
    slide is introduced by a delimiter line of its own.
    """

    body = f"\n\n{SLIDE_DELIMITER}\n\n".join(slides)
    if header and body:
        return f"{header}\n\n{body}\n"
    if header or body:
        return f"{header or body}\n"
    return ""


@dataclass(frozen=True, slots=True)
class Slide:
    """A single slide produced by the content generation step."""

    title: str
    content: str
    layout: str = "content"
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Slide":
        notes = data.get("notes")
        content = data.get("content") or ""
        if isinstance(content, list):
            content = "\n".join(f"- {item}" for item in content)
        return cls(
            title=str(data.get("title") or ""),
            content=str(content),
            layout=str(data.get("layout") or "content"),
            notes=str(notes) if notes else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "layout": self.layout,
        }
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass(frozen=True, slots=True)
class StyleColors:
    primary: str
    secondary: str
    background: str
    text: str


@dataclass(frozen=True, slots=True)
class StyleFonts:
    title: str
    body: str


@dataclass(frozen=True, slots=True)
class StyleDescriptor:
    """Colour and font settings applied uniformly across a presentation."""

    colors: StyleColors
    fonts: StyleFonts
    layouts: Tuple[str, ...] = ()
    images: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleDescriptor":
        colors = data.get("colors", {})
        fonts = data.get("fonts", {})
        return cls(
            colors=StyleColors(
                primary=colors.get("primary", DEFAULT_STYLE.colors.primary),
                secondary=colors.get("secondary", DEFAULT_STYLE.colors.secondary),
                background=colors.get("background", DEFAULT_STYLE.colors.background),
                text=colors.get("text", DEFAULT_STYLE.colors.text),
            ),
            fonts=StyleFonts(
                title=fonts.get("title", DEFAULT_STYLE.fonts.title),
                body=fonts.get("body", DEFAULT_STYLE.fonts.body),
            ),
            layouts=tuple(data.get("layouts", ())),
            images=tuple(data.get("images", ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colors": {
                "primary": self.colors.primary,
                "secondary": self.colors.secondary,
                "background": self.colors.background,
                "text": self.colors.text,
            },
            "fonts": {"title": self.fonts.title, "body": self.fonts.body},
            "layouts": list(self.layouts),
            "images": list(self.images),
        }


DEFAULT_STYLE = StyleDescriptor(
    colors=StyleColors(
        primary="#2563eb",
        secondary="#7c3aed",
        background="#ffffff",
        text="#1f2937",
    ),
    fonts=StyleFonts(title="Inter, sans-serif", body="Inter, sans-serif"),
    layouts=("title", "content", "image"),
)


@dataclass(frozen=True, slots=True)
class DeckDocument:
    """A presentation document kept as a header block plus slide blocks.

    The header holds the Marp front matter and generated style rules. Each
    entry of ``slides`` is the already formatted markdown of one slide, in
    original generation order. Text serialization happens in
    :meth:`to_markdown`, so slide bodies containing delimiter-like lines are
    never confused with real separators while the document stays in memory.
    """

    header: str = ""
    slides: Tuple[str, ...] = ()

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    def blocks(self) -> List[str]:
        """Return ``[header, *slides]``; the header is always block 0."""

        return [self.header, *self.slides]

    def with_slides(self, slides: Tuple[str, ...]) -> "DeckDocument":
        return DeckDocument(header=self.header, slides=tuple(slides))

    def to_markdown(self) -> str:
        return serialize_blocks(self.header, self.slides)


@dataclass(frozen=True, slots=True)
class SlideRange:
    """Closed interval of 1-based slide positions."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"Invalid slide range: {self.start}-{self.end}")

    def positions(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __str__(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"


@dataclass(slots=True)
class PresentationRecord:
    """A generated presentation as kept by the presentation store."""

    title: str
    content: str
    llm_provider: str
    model: str
    slide_count: int
    document: DeckDocument
    guidance: Optional[str] = None
    template_styles: Optional[StyleDescriptor] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    slides: List[Slide] = field(default_factory=list)

    @property
    def marp_content(self) -> str:
        return self.document.to_markdown()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "guidance": self.guidance,
            "llm_provider": self.llm_provider,
            "model": self.model,
            "slide_count": self.slide_count,
            "template_styles": (
                self.template_styles.to_dict() if self.template_styles else None
            ),
            "marp_content": self.marp_content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
