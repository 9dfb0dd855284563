"""Parse slide range expressions and filter documents down to the selection.

A range expression is a comma separated list of positions (``3``) and
dash separated pairs (``1-3``), e.g. ``"1-3, 5, 7-9"``. Parsing is lenient:
tokens that are not integers or whose start exceeds their end are dropped
instead of failing the whole expression. An empty expression means "no
filter", which callers must treat as "all slides".

Numbers must consist of digits only. This is stricter than a prefix-based
integer parse: ``"3abc"``, ``"+3"`` and ``"1-3-5"`` are dropped rather than
read as ``3``, ``3`` and ``1-3``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from .deck_assembler import parse_document
from .slide_models import DeckDocument, SlideRange

LOGGER = logging.getLogger(__name__)

_INTEGER = re.compile(r"^\d+$")

DocumentLike = Union[DeckDocument, str]


@dataclass(frozen=True)
class RangeParseResult:
    """Outcome of parsing a range expression, including discarded tokens."""

    ranges: List[SlideRange] = field(default_factory=list)
    dropped_tokens: List[str] = field(default_factory=list)

    @property
    def has_dropped_tokens(self) -> bool:
        return bool(self.dropped_tokens)


def parse_slide_ranges_report(expression: Optional[str]) -> RangeParseResult:
    """Parse ``expression`` and report the tokens that were dropped."""

    if not expression or not expression.strip():
        return RangeParseResult()

    ranges: List[SlideRange] = []
    dropped: List[str] = []
    for token in (part.strip() for part in expression.split(",")):
        if not token:
            continue
        bounds = _parse_token(token)
        if bounds is None:
            dropped.append(token)
            continue
        start, end = bounds
        # Position 0 does not exist; keep whatever part of the token is valid.
        if end < 1:
            dropped.append(token)
            continue
        slide_range = SlideRange(max(start, 1), end)
        if slide_range not in ranges:
            ranges.append(slide_range)

    if dropped:
        LOGGER.debug("Dropped malformed slide range tokens: %s", dropped)
    return RangeParseResult(ranges=ranges, dropped_tokens=dropped)


def parse_slide_ranges(expression: Optional[str]) -> List[SlideRange]:
    """Parse ``expression`` into slide ranges, silently dropping bad tokens."""

    return parse_slide_ranges_report(expression).ranges


def selected_positions(slide_count: int, ranges: Iterable[SlideRange]) -> List[int]:
    """Return the distinct 1-based positions covered by ``ranges``, ascending.

    Positions beyond ``slide_count`` are ignored.
    """

    selected = set()
    for slide_range in ranges:
        upper = min(slide_range.end, slide_count)
        selected.update(range(slide_range.start, upper + 1))
    return sorted(selected)


def filter_document(document: DocumentLike, ranges: Iterable[SlideRange]) -> DeckDocument:
    """Return a new document holding the header and the selected slides.

    Slides keep their original relative order no matter how the ranges were
    written. A selection that matches nothing yields a header-only document.
    """

    if isinstance(document, str):
        document = parse_document(document)
    positions = selected_positions(document.slide_count, ranges)
    LOGGER.debug(
        "Selected slides %s out of %d", positions, document.slide_count
    )
    return document.with_slides(
        tuple(document.slides[position - 1] for position in positions)
    )


def filter_marp_markdown(markdown: str, ranges: Iterable[SlideRange]) -> str:
    return filter_document(parse_document(markdown), ranges).to_markdown()


def select_slides(document: DocumentLike, expression: Optional[str]) -> DeckDocument:
    """Apply a user supplied range expression to ``document``.

    An empty expression, or one whose every token was dropped, leaves the
    document unchanged.
    """

    if isinstance(document, str):
        document = parse_document(document)
    ranges = parse_slide_ranges(expression)
    if not ranges:
        return document
    return filter_document(document, ranges)


def _parse_token(token: str) -> Optional[Tuple[int, int]]:
    if "-" in token:
        parts = [part.strip() for part in token.split("-")]
        if len(parts) != 2 or not all(_INTEGER.match(part) for part in parts):
            return None
        start, end = int(parts[0]), int(parts[1])
        if start > end:
            return None
        return start, end
    if not _INTEGER.match(token):
        return None
    number = int(token)
    return number, number


__all__ = [
    "RangeParseResult",
    "filter_document",
    "filter_marp_markdown",
    "parse_slide_ranges",
    "parse_slide_ranges_report",
    "select_slides",
    "selected_positions",
]
