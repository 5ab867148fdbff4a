"""Gemini-backed translation of one article into the other languages."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx

from markdown_engine.editor.languages import LanguageWorkspace, get_language
from markdown_engine.runtime import telemetry
from markdown_engine.runtime.settings import EngineSettings

from .extract import extract_json_candidate, parse_translations, read_candidate_text
from .models import TranslationError, TranslationMap, TranslationRequest

GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)
SYSTEM_INSTRUCTION = "Return JSON only. Do not wrap output in markdown or code fences."
SNIPPET_LIMIT = 800

_SCHEMA = """{
  "translations": {
    "<language_key>": {
      "title": "...",
      "content": "..."
    }
  }
}"""

_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_HARASSMENT",
)


def build_prompt(request: TranslationRequest) -> str:
    source = get_language(request.source_language)
    payload = {
        "sourceLanguage": source.key,
        "sourceLanguageName": source.name,
        "targets": [
            {"key": key, "name": get_language(key).name}
            for key in request.effective_targets
        ],
        "title": request.title,
        "content": request.content,
    }
    return (
        "You are a translation engine. Translate the article title and markdown "
        f"content from {source.name} into each target language. Preserve markdown "
        "formatting, punctuation, links, code, and proper nouns. Do not add "
        "commentary. Output JSON only with the exact schema and do not wrap it in "
        f"markdown or code fences:\n\n{_SCHEMA}\n\n"
        "Language keys must match the provided targets. Input:\n"
        f"{json.dumps(payload, ensure_ascii=False)}"
    )


def build_repair_prompt(text: str, request: TranslationRequest) -> str:
    return (
        "Extract translations from the text below and output JSON only with the "
        f"exact schema:\n\n{_SCHEMA}\n\n"
        f"Targets: {', '.join(request.effective_targets)}\n\nText:\n{text}"
    )


def build_body(prompt: str) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "generationConfig": {
            "temperature": 0.2,
            "topP": 0.9,
            "maxOutputTokens": 8192,
            "responseMimeType": "application/json",
        },
        "safetySettings": [
            {"category": category, "threshold": "BLOCK_NONE"}
            for category in _SAFETY_CATEGORIES
        ],
    }


class GeminiTranslator:
    """Calls ``generateContent`` and turns the reply into per-language pairs.

    A reply with no locatable JSON gets exactly one repair round-trip; if that
    call itself fails the original reply is reported instead.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or EngineSettings.from_env()
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return GEMINI_ENDPOINT.format(model=self.settings.gemini_model)

    async def translate(self, request: TranslationRequest) -> TranslationMap:
        api_key = self.settings.gemini_api_key
        if not api_key:
            raise TranslationError("Missing GEMINI_API_KEY", status=500)

        telemetry.record_event(
            "translation.request",
            data={
                "source": request.source_language,
                "targets": ",".join(request.effective_targets),
            },
        )

        async with httpx.AsyncClient(
            timeout=self.settings.translate_timeout, transport=self._transport
        ) as client:
            try:
                data = await self._generate(client, api_key, build_prompt(request))
            except (httpx.HTTPError, ValueError) as exc:
                telemetry.record_event(
                    "translation.failed", level="error", data={"detail": str(exc)}
                )
                raise TranslationError(
                    "Translation request failed", detail=str(exc) or "Unknown error"
                ) from exc

            text, reason = read_candidate_text(data)
            if not text:
                raise TranslationError(
                    "Translation response was empty",
                    detail=reason or "No content returned",
                )

            candidate = extract_json_candidate(text)
            if candidate is None:
                candidate = await self._repair(client, api_key, text, request)

        if candidate is None:
            raise TranslationError(
                "Failed to locate JSON in translation response",
                detail={"finishReason": reason, "snippet": text[:SNIPPET_LIMIT]},
            )

        translations = parse_translations(candidate, request.effective_targets)
        telemetry.record_event(
            "translation.completed",
            data={"languages": ",".join(translations)},
        )
        return translations

    async def _generate(
        self, client: httpx.AsyncClient, api_key: str, prompt: str
    ) -> Any:
        response = await client.post(
            self.endpoint, params={"key": api_key}, json=build_body(prompt)
        )
        if response.is_error:
            raise httpx.HTTPStatusError(
                response.text or "Gemini request failed",
                request=response.request,
                response=response,
            )
        return response.json()

    async def _repair(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        text: str,
        request: TranslationRequest,
    ) -> Optional[str]:
        telemetry.record_event("translation.repair", level="warning")
        try:
            data = await self._generate(
                client, api_key, build_repair_prompt(text, request)
            )
        except (httpx.HTTPError, ValueError) as exc:
            telemetry.record_event(
                "translation.repair_failed", level="warning", data={"detail": str(exc)}
            )
            return None
        repaired, _ = read_candidate_text(data)
        return extract_json_candidate(repaired)


def apply_translations(
    workspace: LanguageWorkspace, translations: TranslationMap
) -> None:
    """Write translated titles and content into their language tabs.

    Each content change is a recorded edit, so it can be undone per tab.
    Languages the workspace does not know raise ``KeyError``.
    """

    for language, fields in translations.items():
        workspace.set_title(language, fields.get("title", ""))
        buffer = workspace.buffer(language)
        content = fields.get("content", "")
        if content != buffer.text:
            buffer.replace_text(content, label="translation", record=True)


__all__ = [
    "GEMINI_ENDPOINT",
    "GeminiTranslator",
    "apply_translations",
    "build_body",
    "build_prompt",
    "build_repair_prompt",
]
