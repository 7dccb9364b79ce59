# ai_router/engine/estimator.py
"""
Pre-flight token and cost estimation.

Counts the tokens of a CompletionRequest before it is sent so callers (quota
checks, the "estimated cost" badge in the UI) can show a number without
spending a provider call.

OpenAI models use their own tiktoken encoding. Anthropic and Gemini do not
publish theirs, so cl100k_base stands in as a close-enough approximation.
Actual billed usage comes from the provider's response, not from here.
"""

from __future__ import annotations

import functools

from .pricing import estimate_cost
from ..models import CompletionRequest

_FALLBACK_ENCODING = "cl100k_base"
_OVERHEAD_PER_MESSAGE = 4  # role + separators in chat format
_REPLY_PRIMER = 2
_IMAGE_TOKENS = 258  # Gemini bills an inline image as a fixed block


@functools.lru_cache(maxsize=8)
def _get_encoding(model: str):  # type: ignore[return]
    """Return the tiktoken encoding for *model*, cached per model string."""
    try:
        import tiktoken  # type: ignore[import]
    except ImportError as exc:
        raise ImportError(
            "tiktoken is required for token estimation. "
            "Install it with: pip install tiktoken"
        ) from exc
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding(_FALLBACK_ENCODING)


def estimate_tokens(request: CompletionRequest, model: str | None = None) -> int:
    """
    Estimate the prompt tokens *request* will be billed for.

    Counts the system prompt, every history turn and the trailing prompt,
    plus per-message chat overhead and a fixed block for an attached image.
    """
    enc = _get_encoding(model or "")
    total = _REPLY_PRIMER
    for message in request.to_messages():
        total += _OVERHEAD_PER_MESSAGE + len(enc.encode(message["content"]))
    if request.image:
        total += _IMAGE_TOKENS
    return total


def estimate_request_cost(request: CompletionRequest, model: str) -> float:
    """
    Upper-bound USD cost of sending *request* to *model*.

    Assumes the completion uses the full ``request.max_tokens`` budget.
    """
    return estimate_cost(model, estimate_tokens(request, model), request.max_tokens)


def estimate_prompt_cost(
    prompt: str,
    model: str,
    expected_completion_tokens: int = 0,
) -> float:
    """Estimate the USD cost of sending a bare *prompt* to *model*."""
    prompt_tokens = estimate_tokens(CompletionRequest(prompt=prompt), model)
    return estimate_cost(model, prompt_tokens, expected_completion_tokens)
