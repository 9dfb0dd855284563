from pathlib import Path

import pytest

from textdeck.config import DeckSettings, detect_serverless


@pytest.mark.parametrize(
    "environ",
    [
        {"VERCEL": "1"},
        {"AWS_LAMBDA_FUNCTION_NAME": "handler"},
        {"NETLIFY": "true"},
        {"NODE_ENV": "production"},
    ],
)
def test_detect_serverless_platforms(environ):
    assert detect_serverless(environ) is True


def test_production_with_port_is_not_serverless():
    assert detect_serverless({"NODE_ENV": "production", "PORT": "8080"}) is False
    assert detect_serverless({}) is False


def test_settings_defaults():
    settings = DeckSettings.from_env({})

    assert settings.marp_command is None
    assert settings.render_timeout == 120.0
    assert settings.render_max_concurrency == 2
    assert settings.temp_dir is None
    assert settings.can_render_binary is True
    assert settings.is_serverless is False


def test_settings_read_environment_overrides():
    settings = DeckSettings.from_env(
        {
            "TEXTDECK_MARP_COMMAND": "npx @marp-team/marp-cli",
            "TEXTDECK_RENDER_TIMEOUT": "30",
            "TEXTDECK_RENDER_MAX_CONCURRENCY": "0",
            "TEXTDECK_TEMP_DIR": "/tmp/decks",
        }
    )

    assert settings.marp_command == "npx @marp-team/marp-cli"
    assert settings.render_timeout == 30.0
    assert settings.render_max_concurrency == 1
    assert settings.temp_dir == Path("/tmp/decks")


def test_serverless_disables_binary_rendering_unless_overridden():
    assert DeckSettings.from_env({"VERCEL": "1"}).can_render_binary is False

    forced = DeckSettings.from_env({"VERCEL": "1", "TEXTDECK_RENDER_BINARY": "yes"})
    assert forced.can_render_binary is True
    assert forced.is_serverless is True

    disabled = DeckSettings.from_env({"TEXTDECK_RENDER_BINARY": "off"})
    assert disabled.can_render_binary is False


def test_invalid_numbers_fall_back_to_defaults():
    settings = DeckSettings.from_env(
        {"TEXTDECK_RENDER_TIMEOUT": "soon", "TEXTDECK_RENDER_MAX_CONCURRENCY": "many"}
    )

    assert settings.render_timeout == 120.0
    assert settings.render_max_concurrency == 2
