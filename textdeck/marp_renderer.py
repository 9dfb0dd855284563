"""Render Marp documents into HTML, PPTX and PDF using the Marp CLI."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .config import DeckSettings
from .deck_assembler import parse_document
from .exceptions import RenderCapabilityError, RenderError
from .slide_models import DeckDocument, SlideRange
from .slide_ranges import filter_document

LOGGER = logging.getLogger(__name__)

MARP_PACKAGE = "@marp-team/marp-cli"

OUTPUT_FLAGS = {
    "html": "--html",
    "pptx": "--pptx",
    "pdf": "--pdf",
}

DocumentLike = Union[DeckDocument, str]


class MarpRenderer:
    """Convert documents with the Marp CLI, one subprocess per request.

    Concurrent invocations are capped by ``render_max_concurrency`` and each
    one is killed after ``render_timeout`` seconds. Binary formats are only
    produced when ``can_render_binary`` is enabled.
    """

    def __init__(self, settings: Optional[DeckSettings] = None) -> None:
        self.settings = settings or DeckSettings()
        self._slots = threading.BoundedSemaphore(
            max(1, self.settings.render_max_concurrency)
        )

    @property
    def can_render_binary(self) -> bool:
        return self.settings.can_render_binary

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render_html(self, document: DocumentLike) -> str:
        payload = self._run("html", _as_document(document))
        return payload.decode("utf-8")

    def render_pptx(
        self,
        document: DocumentLike,
        ranges: Optional[Iterable[SlideRange]] = None,
    ) -> bytes:
        return self._render_binary("pptx", document, ranges)

    def render_pdf(
        self,
        document: DocumentLike,
        ranges: Optional[Iterable[SlideRange]] = None,
    ) -> bytes:
        return self._render_binary("pdf", document, ranges)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _render_binary(
        self,
        fmt: str,
        document: DocumentLike,
        ranges: Optional[Iterable[SlideRange]],
    ) -> bytes:
        if not self.can_render_binary:
            raise RenderCapabilityError(
                f"{fmt.upper()} export is not available in this environment"
            )
        deck = _as_document(document)
        ranges = list(ranges or [])
        if ranges:
            deck = filter_document(deck, ranges)
        return self._run(fmt, deck)

    def _run(self, fmt: str, document: DeckDocument) -> bytes:
        command = self._base_command()
        markdown = document.to_markdown()
        temp_root = self.settings.temp_dir
        if temp_root is not None:
            Path(temp_root).mkdir(parents=True, exist_ok=True)

        with self._slots, tempfile.TemporaryDirectory(
            prefix="textdeck-", dir=temp_root
        ) as tmpdir:
            input_path = Path(tmpdir) / "presentation.md"
            output_path = Path(tmpdir) / f"presentation.{fmt}"
            input_path.write_text(markdown, encoding="utf-8")

            cmd = [
                *command,
                str(input_path),
                "-o",
                str(output_path),
                OUTPUT_FLAGS[fmt],
            ]
            LOGGER.info(
                "Rendering %s with Marp CLI (%d characters, %d slides)",
                fmt,
                len(markdown),
                document.slide_count,
            )
            try:
                completed = subprocess.run(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=self.settings.render_timeout,
                )
            except FileNotFoundError as exc:
                raise RenderError(
                    f"Marp CLI executable not found: {command[0]}",
                    original_error=exc,
                ) from exc
            except subprocess.TimeoutExpired as exc:
                raise RenderError(
                    f"Marp CLI timed out after {self.settings.render_timeout} seconds",
                    stderr=_decode(exc.stderr),
                    original_error=exc,
                ) from exc

            stderr = _decode(completed.stderr)
            if completed.stdout:
                LOGGER.debug("Marp stdout: %s", _decode(completed.stdout))
            if completed.returncode != 0:
                LOGGER.warning(
                    "Marp CLI exited with code %s: %s", completed.returncode, stderr
                )
                raise RenderError(
                    f"Marp CLI exited with code {completed.returncode}. Stderr: {stderr}",
                    exit_status=completed.returncode,
                    stderr=stderr,
                )
            if not output_path.exists():
                raise RenderError(
                    f"Marp CLI did not produce {output_path.name}",
                    exit_status=completed.returncode,
                    stderr=stderr,
                )

            payload = output_path.read_bytes()
            LOGGER.info("Generated %s output: %d bytes", fmt, len(payload))
            return payload

    def _base_command(self) -> List[str]:
        if self.settings.marp_command:
            return shlex.split(self.settings.marp_command)
        return _locate_marp()


# ----------------------------------------------------------------------
# Helper functions
# ----------------------------------------------------------------------

def _as_document(document: DocumentLike) -> DeckDocument:
    if isinstance(document, DeckDocument):
        return document
    return parse_document(document)


def _decode(stream: Optional[bytes]) -> str:
    if not stream:
        return ""
    if isinstance(stream, str):
        return stream
    return stream.decode("utf-8", errors="replace")


def _locate_marp() -> List[str]:
    marp_path = shutil.which("marp")
    if marp_path:
        return [marp_path]
    return ["npx", "--yes", MARP_PACKAGE]
