# ai_router/structured.py
"""
Best-effort structured extraction from model output.

Helpers that ask a provider for JSON cannot rely on getting it. Instead of
raising on a parse failure they return one of two results:

  Parsed(value)           the text held valid JSON matching the schema
  FallbackRaw(raw, value) it did not; *value* is a default-shaped record
                          built from the raw text, with empty structured fields

Both carry ``value`` so callers that only want "best effort" can read it
directly, while callers that care can check ``isinstance(result, Parsed)``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T


@dataclass(frozen=True)
class FallbackRaw(Generic[T]):
    raw: str
    value: T


StructuredResult = Union[Parsed[T], FallbackRaw[T]]


def _load_json(text: str, span: re.Pattern[str], expected: type) -> Any:
    """
    Decode a JSON value of type *expected* from *text*.

    Tries the whole text (minus a Markdown code fence), then the outermost
    span matched by *span*. Raises ValueError when neither decodes to
    *expected*.
    """
    candidate = text.strip()
    fenced = _FENCE_RE.match(candidate)
    if fenced:
        candidate = fenced.group(1)
    try:
        data = json.loads(candidate)
    except ValueError:
        match = span.search(candidate)
        if match is None:
            raise
        data = json.loads(match.group(0))
    if not isinstance(data, expected):
        raise ValueError(f"expected a JSON {expected.__name__}, got {type(data).__name__}")
    return data


def _load_json_object(text: str) -> dict[str, Any]:
    return _load_json(text, _OBJECT_RE, dict)


def extract_structured(
    text: str,
    schema: type[M],
    fallback: Callable[[str], M],
) -> StructuredResult[M]:
    """Parse *text* into *schema*, or salvage it with *fallback*."""
    try:
        return Parsed(schema.model_validate(_load_json_object(text)))
    except ValueError:
        return FallbackRaw(raw=text, value=fallback(text))


def extract_mapping(text: str) -> StructuredResult[dict[str, Any]]:
    """Parse *text* into a plain dict, or fall back to an empty one."""
    try:
        return Parsed(_load_json_object(text))
    except ValueError:
        return FallbackRaw(raw=text, value={})


def extract_strings(
    text: str,
    fallback: Callable[[str], list[str]],
) -> StructuredResult[list[str]]:
    """Parse *text* into a JSON array of strings, or salvage it with *fallback*."""
    try:
        data = _load_json(text, _ARRAY_RE, list)
        if not all(isinstance(item, str) for item in data):
            raise ValueError("expected an array of strings")
        return Parsed(data)
    except ValueError:
        return FallbackRaw(raw=text, value=fallback(text))


def first_lines(text: str, limit: int, default: str) -> list[str]:
    """Return the first *limit* non-blank lines of *text*, or ``[default]``."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[:limit] or [default]


# ----------------------------------------------------------------------
# Result shapes used by the assistant helpers
# ----------------------------------------------------------------------


class _Structured(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DocumentAnalysis(_Structured):
    summary: str = ""
    key_points: list[str] = Field(default_factory=list, alias="keyPoints")
    entities: list[str] = Field(default_factory=list)
    sentiment: str = "neutral"


class EmailDraft(_Structured):
    subject: str = "Email Subject"
    body: str = ""


class MeetingSummary(_Structured):
    summary: str = ""
    decisions: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list, alias="actionItems")
    next_steps: list[str] = Field(default_factory=list, alias="nextSteps")


class EmailVariation(_Structured):
    subject: str = ""
    body: str = ""


class EmailCampaign(_Structured):
    subject: str = "Email Subject"
    preview: str = ""
    body: str = ""
    variations: list[EmailVariation] = Field(default_factory=list)


class MarketingStrategy(_Structured):
    strategy: str = ""
    tactics: list[str] = Field(default_factory=list)
    timeline: str = ""
    budget: str = ""
    metrics: list[str] = Field(default_factory=list)
