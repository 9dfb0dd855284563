import pytest

from textdeck import slide_generation
from textdeck.exceptions import ProviderError
from textdeck.slide_generation import (
    SYSTEM_PROMPT,
    GenerationContext,
    SlideContentGenerator,
    slide_count_instruction,
)
from textdeck.slide_models import Slide

from tests.llm_stubs import RecordingFactory, StubJSONLLM, slide_payload


def test_generate_slides_from_json_array():
    stub = StubJSONLLM(slide_payload(["Intro", "Details"]))
    generator = SlideContentGenerator(stub)

    slides = generator.generate_slides(GenerationContext(content="Some long text"))

    assert [slide.title for slide in slides] == ["Intro", "Details"]
    assert slides[0].notes == "Talk about Intro"
    request = stub.requests[0]
    assert request.system_prompt == SYSTEM_PROMPT
    assert "Some long text" in request.prompt


def test_generate_slides_accepts_wrapped_payload():
    stub = StubJSONLLM({"slides": slide_payload(["Only"])})

    slides = SlideContentGenerator(stub).generate_slides(GenerationContext(content="x"))

    assert slides == [
        Slide(title="Only", content="- Point about Only", notes="Talk about Only")
    ]


def test_generate_slides_parses_fenced_text_when_unparsed():
    stub = StubJSONLLM(text='```json\n[{"title": "Fenced", "content": "body"}]\n```')

    slides = SlideContentGenerator(stub).generate_slides(GenerationContext(content="x"))

    assert slides[0].title == "Fenced"
    assert slides[0].layout == "content"


def test_list_content_becomes_bullets():
    stub = StubJSONLLM([{"title": "List", "content": ["a", "b"]}])

    slides = SlideContentGenerator(stub).generate_slides(GenerationContext(content="x"))

    assert slides[0].content == "- a\n- b"


@pytest.mark.parametrize(
    "stub",
    [
        StubJSONLLM(error="rate limited"),
        StubJSONLLM(text="not json at all"),
        StubJSONLLM(text=""),
        StubJSONLLM({"unexpected": True}),
        StubJSONLLM(["just a string"]),
    ],
)
def test_invalid_provider_output_raises_provider_error(stub):
    generator = SlideContentGenerator(stub)

    with pytest.raises(ProviderError) as excinfo:
        generator.generate_slides(GenerationContext(content="x"))

    assert excinfo.value.provider == "stub"


def test_prompt_includes_guidance_and_slide_count():
    generator = SlideContentGenerator(StubJSONLLM([]))

    prompt = generator.build_prompt(
        GenerationContext(content="Body", guidance="For executives", slide_count_option="2-5")
    )

    assert "Guidance: For executives" in prompt
    assert "Create between 2-5 slides." in prompt
    assert prompt.endswith("Return only the JSON array, no additional text.")


def test_unknown_slide_count_option_falls_back_to_automatic():
    assert slide_count_instruction("7-8") == slide_count_instruction("automatic")
    assert slide_count_instruction(None) == slide_count_instruction("automatic")


def test_module_level_generate_slides_uses_provider_registry(monkeypatch):
    stub = StubJSONLLM(slide_payload(["A"]))
    factory = RecordingFactory(stub)
    monkeypatch.setattr(slide_generation, "create_model", factory)

    slides = slide_generation.generate_slides(
        "content", None, "openai", "gpt-5", "sk-test", slide_count_option="5-10"
    )

    assert [slide.title for slide in slides] == ["A"]
    assert factory.calls == [
        {"provider": "openai", "api_key": "sk-test", "model_name": "gpt-5"}
    ]
    assert "Create between 5-10 slides." in stub.requests[0].prompt
