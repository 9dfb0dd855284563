"""Runtime settings loaded from the environment (and an optional ``.env`` file)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

SERVERLESS_ENV_VARS: Tuple[str, ...] = (
    "VERCEL",
    "AWS_LAMBDA_FUNCTION_NAME",
    "NETLIFY",
    "RAILWAY_PROJECT_ID",
    "CF_PAGES",
    "FUNCTIONS_WORKER_RUNTIME",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def detect_serverless(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return ``True`` when running on a platform that cannot spawn the Marp CLI."""

    env = os.environ if environ is None else environ
    if any(env.get(name) for name in SERVERLESS_ENV_VARS):
        return True
    return env.get("NODE_ENV") == "production" and not env.get("PORT")


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    LOGGER.warning("Ignoring unrecognised boolean value: %r", value)
    return None


def _parse_number(value: Optional[str], default, cast):
    if value is None or not value.strip():
        return default
    try:
        return cast(value)
    except ValueError:
        LOGGER.warning("Ignoring invalid numeric setting %r, using %s", value, default)
        return default


@dataclass
class DeckSettings:
    """Settings shared by the renderer and the presentation service."""

    marp_command: Optional[str] = None
    render_timeout: float = 120.0
    render_max_concurrency: int = 2
    temp_dir: Optional[Path] = None
    can_render_binary: bool = True
    is_serverless: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        dotenv: bool = True,
    ) -> "DeckSettings":
        if dotenv and environ is None:
            load_dotenv()
        env = os.environ if environ is None else environ

        serverless = detect_serverless(env)
        override = _parse_bool(env.get("TEXTDECK_RENDER_BINARY"))
        can_render_binary = (not serverless) if override is None else override

        temp_dir = env.get("TEXTDECK_TEMP_DIR")
        settings = cls(
            marp_command=env.get("TEXTDECK_MARP_COMMAND") or None,
            render_timeout=_parse_number(env.get("TEXTDECK_RENDER_TIMEOUT"), 120.0, float),
            render_max_concurrency=max(
                1, _parse_number(env.get("TEXTDECK_RENDER_MAX_CONCURRENCY"), 2, int)
            ),
            temp_dir=Path(temp_dir) if temp_dir else None,
            can_render_binary=can_render_binary,
            is_serverless=serverless,
        )
        LOGGER.debug("Loaded settings: %s", settings)
        return settings
