import json
from types import SimpleNamespace

import pytest

from LLM_API import decorators
from LLM_API.converters import strip_code_fences
from LLM_API.data_classes import JSONRequest
from LLM_API.decorators import with_retry
from LLM_API.exceptions import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMInsufficientQuotaError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMValidationError,
    classify_provider_error,
)
from LLM_API.providers import PROVIDER_MODELS, create_model
from LLM_API.providers import claude as claude_module
from LLM_API.providers import gemini as gemini_module
from LLM_API.providers import openai as openai_module


class StatusError(Exception):
    def __init__(self, message, status_code=None, code=None, headers=None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.response = SimpleNamespace(headers=headers or {})


class ReadTimeout(Exception):
    pass


SLIDES = [{"title": "Intro", "content": "- hello"}]


class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **params):
        self.calls.append(params)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def _openai_reply(text):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=3, completion_tokens=5, total_tokens=8),
    )


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(decorators.time, "sleep", lambda seconds: None)


@pytest.fixture
def openai_factory(monkeypatch):
    def build(replies):
        completions = FakeCompletions(replies)

        class FakeOpenAI:
            def __init__(self, api_key=None):
                self.api_key = api_key
                self.chat = SimpleNamespace(completions=completions)

        monkeypatch.setattr(openai_module, "OpenAI", FakeOpenAI)
        return completions

    return build


def test_openai_complete_json_uses_json_mode(openai_factory):
    completions = openai_factory([_openai_reply(json.dumps({"slides": SLIDES}))])
    model = create_model("openai", api_key="sk-test", model_name="gpt-4-turbo")

    response = model.complete_json(
        JSONRequest(prompt="Make slides", system_prompt="Only JSON", temperature=0.7)
    )

    assert response.success
    assert response.parsed_output == {"slides": SLIDES}
    assert response.usage["total_tokens"] == 8
    params = completions.calls[0]
    assert params["response_format"] == {"type": "json_object"}
    assert params["messages"][0] == {"role": "system", "content": "Only JSON"}
    assert params["temperature"] == 0.7


def test_openai_reasoning_models_skip_temperature(openai_factory):
    completions = openai_factory([_openai_reply("[]")])
    model = create_model("openai", api_key="sk-test")

    model.complete_json(JSONRequest(prompt="Make slides", temperature=0.7))

    assert model.model_name == PROVIDER_MODELS["openai"][0]
    assert "temperature" not in completions.calls[0]


def test_openai_retries_rate_limits_then_succeeds(openai_factory):
    completions = openai_factory(
        [StatusError("slow down", status_code=429), _openai_reply("[]")]
    )
    model = create_model("openai", api_key="sk-test")

    response = model.complete_json(JSONRequest(prompt="Make slides"))

    assert response.error is None
    assert response.parsed_output == []
    assert len(completions.calls) == 2


def test_openai_authentication_error_is_reported(openai_factory):
    completions = openai_factory([StatusError("bad key", status_code=401)])
    model = create_model("openai", api_key="sk-test")

    response = model.complete_json(JSONRequest(prompt="Make slides"))

    assert "authentication" in response.error
    assert len(completions.calls) == 1


def test_openai_invalid_json_sets_validation_error(openai_factory):
    openai_factory([_openai_reply("Here are your slides!")])
    model = create_model("openai", api_key="sk-test")

    response = model.complete_json(JSONRequest(prompt="Make slides"))

    assert response.parsed_output is None
    assert response.validation_error.startswith("Response is not valid JSON")
    assert not response.success


def test_empty_prompt_is_rejected_without_calling_sdk(openai_factory):
    completions = openai_factory([])
    model = create_model("openai", api_key="sk-test")

    response = model.complete_json(JSONRequest(prompt="   "))

    assert "empty_prompt" in response.error
    assert completions.calls == []


def test_claude_sends_system_prompt_and_strips_fences(monkeypatch):
    messages = FakeCompletions(
        [
            SimpleNamespace(
                content=[SimpleNamespace(type="text", text="```json\n[]\n```")],
                usage=SimpleNamespace(input_tokens=2, output_tokens=4),
            )
        ]
    )

    class FakeAnthropic:
        def __init__(self, api_key=None):
            self.messages = messages

    monkeypatch.setattr(claude_module.anthropic, "Anthropic", FakeAnthropic)
    model = create_model("anthropic", api_key="key")

    response = model.complete_json(JSONRequest(prompt="Make slides", system_prompt="JSON only"))

    assert response.parsed_output == []
    assert response.usage == {"prompt_tokens": 2, "completion_tokens": 4, "total_tokens": 6}
    params = messages.calls[0]
    assert params["system"] == "JSON only"
    assert params["max_tokens"] == 4000
    assert not model.supports_feature("json_mode")


def test_gemini_requests_json_mime_type(monkeypatch):
    calls = []

    class FakeModels:
        def generate_content(self, **params):
            calls.append(params)
            return SimpleNamespace(text=json.dumps(SLIDES), usage_metadata=None)

    class FakeClient:
        def __init__(self, api_key=None):
            self.models = FakeModels()

    monkeypatch.setattr(gemini_module.genai, "Client", FakeClient)
    model = create_model("gemini", api_key="key", model_name="gemini-2.5-pro")

    response = model.complete_json(JSONRequest(prompt="Make slides", system_prompt="JSON only"))

    assert response.parsed_output == SLIDES
    config = calls[0]["config"]
    assert config.response_mime_type == "application/json"
    assert config.system_instruction == "JSON only"
    assert calls[0]["model"] == "gemini-2.5-pro"


def test_create_model_rejects_unknown_provider():
    with pytest.raises(LLMValidationError) as excinfo:
        create_model("mystery", api_key="key")

    assert excinfo.value.error_type == "unsupported_provider"


def test_missing_api_key_raises_authentication_error(monkeypatch):
    monkeypatch.setattr("LLM_API.providers._base_provider.load_dotenv", lambda: None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(LLMAuthenticationError):
        create_model("openai")


@pytest.mark.parametrize(
    "error, expected",
    [
        (StatusError("quota", status_code=429, code="insufficient_quota"), LLMInsufficientQuotaError),
        (StatusError("denied", status_code=403), LLMAuthenticationError),
        (StatusError("busy", status_code=429), LLMRateLimitError),
        (StatusError("missing", status_code=404), LLMModelNotFoundError),
        (StatusError("bad", code=400), LLMValidationError),
        (ReadTimeout("slow"), LLMTimeoutError),
        (StatusError("oops", status_code=500), LLMAPIError),
    ],
)
def test_classify_provider_error(error, expected):
    classified = classify_provider_error(error, "OpenAI")

    assert type(classified) is expected
    assert classified.provider == "OpenAI"
    assert classified.original_error is error


def test_rate_limit_keeps_retry_after_header():
    error = StatusError("busy", status_code=429, headers={"retry-after": "12"})

    assert classify_provider_error(error, "Claude").retry_after == 12


def test_with_retry_gives_up_after_max_attempts():
    attempts = []

    @with_retry(max_attempts=3, delay=0, exceptions=(LLMRateLimitError,))
    def flaky():
        attempts.append(1)
        raise LLMRateLimitError("busy", provider="stub")

    with pytest.raises(LLMAPIError) as excinfo:
        flaky()

    assert len(attempts) == 3
    assert excinfo.value.error_type == "retry_exhausted"


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences("  [1]  ") == "[1]"
    assert strip_code_fences("") == ""


def test_openai_generate_content_returns_plain_text(openai_factory):
    completions = openai_factory([_openai_reply("A short summary")])
    model = create_model("openai", api_key="sk-test")

    response = model.generate_content(JSONRequest(prompt="Summarise"))

    assert response.text == "A short summary"
    assert "response_format" not in completions.calls[0]
