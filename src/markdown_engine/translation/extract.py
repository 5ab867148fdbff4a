"""Pull a JSON payload out of free-form model output."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Mapping, Optional, Tuple

from .models import TranslationError, TranslationMap

_FENCED = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_json_candidate(text: str) -> Optional[str]:
    """Return the most likely JSON object embedded in ``text``.

    A fenced block wins; otherwise the first ``{`` is scanned forward until
    its braces balance. Braces inside strings are not special-cased.
    """

    fenced = _FENCED.search(text)
    if fenced and fenced.group(1):
        return fenced.group(1).strip()

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def read_candidate_text(data: Any) -> Tuple[str, Optional[str]]:
    """Join the first candidate's text parts; also return why generation stopped.

    Any JSON shape is accepted; pieces that are not objects or strings where
    expected count as missing, so odd replies read as empty text.
    """

    data = _mapping(data)
    candidates = data.get("candidates")
    first = candidates[0] if isinstance(candidates, list) and candidates else None
    candidate = _mapping(first)
    parts = _mapping(candidate.get("content")).get("parts")
    if not isinstance(parts, list):
        parts = []
    text = "".join(
        piece
        for piece in (_mapping(part).get("text") for part in parts)
        if isinstance(piece, str)
    )
    reason = candidate.get("finishReason") or _mapping(data.get("promptFeedback")).get(
        "blockReason"
    )
    return text, reason if isinstance(reason, str) else None


def parse_translations(candidate: str, targets: Iterable[str]) -> TranslationMap:
    """Decode ``candidate`` and keep one ``{title, content}`` pair per target.

    The payload may be wrapped in ``{"translations": ...}`` or be the bare map.
    Missing or non-string fields become empty strings.
    """

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise TranslationError("Failed to parse translation response") from exc

    raw = parsed
    if isinstance(parsed, dict) and "translations" in parsed:
        raw = parsed["translations"]
    if not isinstance(raw, dict):
        raise TranslationError("Invalid translation payload")

    translations: TranslationMap = {}
    for language in targets:
        entry = raw.get(language)
        if not isinstance(entry, dict):
            entry = {}
        title = entry.get("title")
        content = entry.get("content")
        translations[language] = {
            "title": title if isinstance(title, str) else "",
            "content": content if isinstance(content, str) else "",
        }
    return translations


__all__ = ["extract_json_candidate", "read_candidate_text", "parse_translations"]
