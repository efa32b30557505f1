"""
Provider response shapes.

Inference endpoints answer with a list of objects, a bare string or a single
object depending on the model. ``parse_response`` classifies the payload and
``extract_text`` pulls the generated text out of each variant; anything that
yields no text is reported as an empty string.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Union

TEXT_FIELDS = ("generated_text", "text")


@dataclass(frozen=True)
class ArrayResponse:
    items: List[Any]


@dataclass(frozen=True)
class StringResponse:
    text: str


@dataclass(frozen=True)
class ObjectResponse:
    fields: Dict[str, Any]


@dataclass(frozen=True)
class EmptyResponse:
    raw: Any = None


ProviderResponse = Union[ArrayResponse, StringResponse, ObjectResponse, EmptyResponse]


def parse_response(payload: Any) -> ProviderResponse:
    if isinstance(payload, list):
        return ArrayResponse(items=payload) if payload else EmptyResponse(raw=payload)
    if isinstance(payload, str):
        return StringResponse(text=payload)
    if isinstance(payload, dict):
        return ObjectResponse(fields=payload)
    return EmptyResponse(raw=payload)


def _text_from_fields(fields: Dict[str, Any]) -> str:
    for name in TEXT_FIELDS:
        value = fields.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def extract_text(response: ProviderResponse) -> str:
    if isinstance(response, ArrayResponse):
        first = response.items[0]
        if isinstance(first, dict):
            return _text_from_fields(first)
        if isinstance(first, str):
            return first
        return ""
    if isinstance(response, StringResponse):
        return response.text
    if isinstance(response, ObjectResponse):
        return _text_from_fields(response.fields)
    return ""


def extract_gemini_text(payload: Any) -> str:
    """Text of the first candidate's first part of a ``generateContent`` reply."""
    if not isinstance(payload, dict):
        return ""
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""
