# ai_router/engine/selector.py
"""
Provider selection heuristics.

Maps a request to the provider that should get the first attempt. Explicit
caller intent always wins; otherwise the prompt is classified by length and
keywords:

  1. longer than LONG_PROMPT_THRESHOLD, or an analytical keyword
     → ANALYTICAL_PROVIDER (Anthropic)
  2. a generative/structured keyword
     → GENERATIVE_PROVIDER (OpenAI)
  3. anything else
     → ANALYTICAL_PROVIDER

A request carrying an image goes to IMAGE_PROVIDER (Gemini), the only
adapter that reads images, before any of the above.

The selector does not make any I/O calls and holds no state.
"""

from __future__ import annotations

from ..constants import (
    ANALYTICAL_KEYWORDS,
    ANALYTICAL_PROVIDER,
    ANTHROPIC,
    AUTO,
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OPENAI_MODEL,
    GEMINI,
    GENERATIVE_KEYWORDS,
    GENERATIVE_PROVIDER,
    IMAGE_PROVIDER,
    LONG_PROMPT_THRESHOLD,
    OPENAI,
)
from ..models import CompletionRequest

# task type → (provider, model)
_TASK_MODELS: dict[str, tuple[str, str]] = {
    "contract": (ANTHROPIC, DEFAULT_ANTHROPIC_MODEL),
    "legal": (ANTHROPIC, DEFAULT_ANTHROPIC_MODEL),
    "analysis": (ANTHROPIC, DEFAULT_ANTHROPIC_MODEL),
    "code": (ANTHROPIC, DEFAULT_ANTHROPIC_MODEL),
    "creative": (OPENAI, DEFAULT_OPENAI_MODEL),
    "email": (OPENAI, DEFAULT_OPENAI_MODEL),
    "content": (OPENAI, DEFAULT_OPENAI_MODEL),
    "extraction": (OPENAI, DEFAULT_OPENAI_MODEL),
    "vision": (GEMINI, DEFAULT_GEMINI_MODEL),
    "image": (GEMINI, DEFAULT_GEMINI_MODEL),
    "search": (GEMINI, DEFAULT_GEMINI_MODEL),
}


def classify_prompt(prompt: str) -> str:
    """Return the preferred provider for *prompt* by length and keywords."""
    text = prompt.lower()
    if len(text) > LONG_PROMPT_THRESHOLD:
        return ANALYTICAL_PROVIDER
    if any(keyword in text for keyword in ANALYTICAL_KEYWORDS):
        return ANALYTICAL_PROVIDER
    if any(keyword in text for keyword in GENERATIVE_KEYWORDS):
        return GENERATIVE_PROVIDER
    return ANALYTICAL_PROVIDER


def select_provider(request: CompletionRequest) -> str:
    """
    Return the provider that should be attempted first for *request*.

    A concrete ``request.provider`` is returned unchanged regardless of the
    prompt; ``"auto"`` or None sends image requests to IMAGE_PROVIDER and
    defers everything else to classify_prompt().
    """
    if request.provider and request.provider != AUTO:
        return request.provider
    if request.image:
        return IMAGE_PROVIDER
    return classify_prompt(request.prompt)


def recommended_model(task_type: str) -> tuple[str, str]:
    """Return ``(provider, model)`` suited to a named task type."""
    return _TASK_MODELS.get(task_type.lower(), (ANTHROPIC, DEFAULT_ANTHROPIC_MODEL))
