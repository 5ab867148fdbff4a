from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest

from markdown_engine.editor import LanguageWorkspace
from markdown_engine.runtime.settings import EngineSettings
from markdown_engine.translation import (
    GeminiTranslator,
    TranslationError,
    TranslationRequest,
    apply_translations,
    extract_json_candidate,
    parse_translations,
    read_candidate_text,
)

PAYLOAD = {
    "translations": {
        "ru": {"title": "Привет", "content": "# Мир"},
        "en": {"title": "Hello", "content": "# World"},
    }
}


def gemini_reply(text: str, finish_reason: str = "STOP") -> Dict[str, Any]:
    return {
        "candidates": [
            {"finishReason": finish_reason, "content": {"parts": [{"text": text}]}}
        ]
    }


def make_request(**overrides: Any) -> TranslationRequest:
    fields: Dict[str, Any] = {
        "source_language": "uz_latin",
        "targets": ["ru", "en"],
        "title": "Salom",
        "content": "# Dunyo",
    }
    fields.update(overrides)
    return TranslationRequest(**fields)


def make_translator(replies: List[httpx.Response], seen: List[httpx.Request]) -> GeminiTranslator:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return replies.pop(0)

    return GeminiTranslator(
        EngineSettings(gemini_api_key="test-key"),
        transport=httpx.MockTransport(handler),
    )


def test_request_deduplicates_and_drops_source() -> None:
    request = make_request(targets=["ru", "uz_latin", "ru", "de", "en"])

    assert request.effective_targets == ("ru", "en")


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"source_language": "de"}, "Invalid source language"),
        ({"targets": []}, "Targets are required"),
        ({"targets": ["uz_latin", "fr"]}, "No valid target languages"),
    ],
)
def test_request_validation(overrides: Dict[str, Any], message: str) -> None:
    with pytest.raises(TranslationError) as excinfo:
        make_request(**overrides)

    assert str(excinfo.value) == message
    assert excinfo.value.status == 400


def test_extract_prefers_fenced_block() -> None:
    text = 'Sure!\n```json\n{"a": 1}\n```\nand {"b": 2}'

    assert extract_json_candidate(text) == '{"a": 1}'


def test_extract_finds_first_balanced_object() -> None:
    text = 'noise {"a": {"b": 1}} trailing {"c": 2}'

    assert extract_json_candidate(text) == '{"a": {"b": 1}}'
    assert extract_json_candidate("no json") is None
    assert extract_json_candidate('{"open": {') is None


def test_read_candidate_text_joins_parts() -> None:
    data = {
        "candidates": [
            {"finishReason": "MAX_TOKENS", "content": {"parts": [{"text": "a"}, {}, {"text": "b"}]}}
        ]
    }

    assert read_candidate_text(data) == ("ab", "MAX_TOKENS")
    assert read_candidate_text({"promptFeedback": {"blockReason": "SAFETY"}}) == ("", "SAFETY")


@pytest.mark.parametrize(
    "data",
    [
        [1],
        "text",
        None,
        {"candidates": "none"},
        {"candidates": [5]},
        {"candidates": [{"content": ["x"]}]},
        {"candidates": [{"content": {"parts": "x"}}]},
        {"candidates": [{"content": {"parts": ["x", 5, {"text": 7}]}}]},
        {"candidates": [{"finishReason": 3}], "promptFeedback": []},
    ],
)
def test_read_candidate_text_tolerates_odd_shapes(data: Any) -> None:
    assert read_candidate_text(data) == ("", None)


def test_parse_translations_fills_blanks() -> None:
    candidate = json.dumps({"ru": {"title": 5, "content": "x"}})

    parsed = parse_translations(candidate, ("ru", "en"))

    assert parsed == {
        "ru": {"title": "", "content": "x"},
        "en": {"title": "", "content": ""},
    }


def test_parse_translations_rejects_bad_payloads() -> None:
    with pytest.raises(TranslationError, match="Failed to parse"):
        parse_translations("{not json}", ("ru",))
    with pytest.raises(TranslationError, match="Invalid translation payload") as excinfo:
        parse_translations('{"translations": "nope"}', ("ru",))
    assert excinfo.value.status == 502


@pytest.mark.asyncio
async def test_translate_success_sends_gemini_request() -> None:
    seen: List[httpx.Request] = []
    translator = make_translator(
        [httpx.Response(200, json=gemini_reply(json.dumps(PAYLOAD)))], seen
    )

    result = await translator.translate(make_request())

    assert result == PAYLOAD["translations"]
    assert len(seen) == 1
    sent = seen[0]
    assert sent.url.params["key"] == "test-key"
    assert sent.url.path.endswith("/models/gemini-2.5-flash:generateContent")
    body = json.loads(sent.content)
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["temperature"] == 0.2
    prompt = body["contents"][0]["parts"][0]["text"]
    assert "from Uzbek (Latin) into each target language" in prompt
    assert '"key": "ru"' in prompt


@pytest.mark.asyncio
async def test_translate_repairs_reply_without_json() -> None:
    seen: List[httpx.Request] = []
    translator = make_translator(
        [
            httpx.Response(200, json=gemini_reply("Here are your translations.")),
            httpx.Response(200, json=gemini_reply("```json\n" + json.dumps(PAYLOAD) + "\n```")),
        ],
        seen,
    )

    result = await translator.translate(make_request())

    assert result["en"]["title"] == "Hello"
    assert len(seen) == 2
    repair_prompt = json.loads(seen[1].content)["contents"][0]["parts"][0]["text"]
    assert repair_prompt.startswith("Extract translations")
    assert "Targets: ru, en" in repair_prompt


@pytest.mark.asyncio
async def test_translate_reports_snippet_when_repair_fails() -> None:
    seen: List[httpx.Request] = []
    translator = make_translator(
        [
            httpx.Response(200, json=gemini_reply("x" * 1000, "MAX_TOKENS")),
            httpx.Response(500, text="boom"),
        ],
        seen,
    )

    with pytest.raises(TranslationError) as excinfo:
        await translator.translate(make_request())

    error = excinfo.value
    assert str(error) == "Failed to locate JSON in translation response"
    assert error.status == 502
    assert error.detail == {"finishReason": "MAX_TOKENS", "snippet": "x" * 800}


@pytest.mark.asyncio
async def test_translate_upstream_error() -> None:
    seen: List[httpx.Request] = []
    translator = make_translator([httpx.Response(403, text="forbidden")], seen)

    with pytest.raises(TranslationError) as excinfo:
        await translator.translate(make_request())

    assert str(excinfo.value) == "Translation request failed"
    assert excinfo.value.status == 502
    assert excinfo.value.detail == "forbidden"


@pytest.mark.asyncio
async def test_translate_empty_reply() -> None:
    seen: List[httpx.Request] = []
    translator = make_translator(
        [httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})], seen
    )

    with pytest.raises(TranslationError) as excinfo:
        await translator.translate(make_request())

    assert str(excinfo.value) == "Translation response was empty"
    assert excinfo.value.detail == "SAFETY"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [[1], {"candidates": [{"content": {"parts": ["x"]}}]}],
)
async def test_translate_malformed_reply_reads_as_empty(body: Any) -> None:
    seen: List[httpx.Request] = []
    translator = make_translator([httpx.Response(200, json=body)], seen)

    with pytest.raises(TranslationError) as excinfo:
        await translator.translate(make_request())

    assert str(excinfo.value) == "Translation response was empty"
    assert excinfo.value.status == 502
    assert excinfo.value.detail == "No content returned"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "repair_body",
    [[1], {"candidates": [{"content": {"parts": [5]}}]}],
)
async def test_translate_ignores_malformed_repair_reply(repair_body: Any) -> None:
    seen: List[httpx.Request] = []
    translator = make_translator(
        [
            httpx.Response(200, json=gemini_reply("no json here")),
            httpx.Response(200, json=repair_body),
        ],
        seen,
    )

    with pytest.raises(TranslationError) as excinfo:
        await translator.translate(make_request())

    assert str(excinfo.value) == "Failed to locate JSON in translation response"
    assert excinfo.value.status == 502
    assert excinfo.value.detail == {"finishReason": "STOP", "snippet": "no json here"}
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_translate_requires_api_key() -> None:
    translator = GeminiTranslator(EngineSettings(gemini_api_key=None))

    with pytest.raises(TranslationError) as excinfo:
        await translator.translate(make_request())

    assert excinfo.value.status == 500
    assert str(excinfo.value) == "Missing GEMINI_API_KEY"


def test_apply_translations_is_undoable() -> None:
    workspace = LanguageWorkspace()
    workspace.load({"ru": {"title": "", "content": "старое"}})

    apply_translations(workspace, PAYLOAD["translations"])

    assert workspace.title("ru") == "Привет"
    assert workspace.buffer("en").text == "# World"
    ru = workspace.buffer("ru")
    assert ru.text == "# Мир"
    ru.undo()
    assert ru.text == "старое"
