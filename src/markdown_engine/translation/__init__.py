"""Article auto-translation through the Gemini ``generateContent`` API."""

from .client import (
    GEMINI_ENDPOINT,
    GeminiTranslator,
    apply_translations,
    build_body,
    build_prompt,
    build_repair_prompt,
)
from .extract import extract_json_candidate, parse_translations, read_candidate_text
from .models import TranslationError, TranslationMap, TranslationRequest

__all__ = [
    "GEMINI_ENDPOINT",
    "GeminiTranslator",
    "TranslationError",
    "TranslationMap",
    "TranslationRequest",
    "apply_translations",
    "build_body",
    "build_prompt",
    "build_repair_prompt",
    "extract_json_candidate",
    "parse_translations",
    "read_candidate_text",
]
