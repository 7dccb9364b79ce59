# ai_router/models.py
"""
Pydantic v2 data models used throughout ai-router.

These are part of the public API surface: the chat UI and the API route
handlers build CompletionRequest objects and read CompletionResponse objects.
"""

from __future__ import annotations

import time
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE

ProviderName = Literal["openai", "anthropic", "gemini"]
ProviderChoice = Literal["openai", "anthropic", "gemini", "auto"]


class ChatMessage(BaseModel):
    """One prior turn of a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    """
    A request submitted by the application.

    The router borrows it read-only; it is never mutated during routing.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="The trailing user message.")
    system_prompt: str | None = Field(default=None)
    history: list[ChatMessage] = Field(
        default_factory=list,
        description="Earlier turns, oldest first. Forwarded verbatim.",
    )
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    provider: ProviderChoice | None = Field(
        default=None,
        description="Pin the first attempt to this provider. 'auto' or None lets the selector decide.",
    )
    model: str | None = Field(
        default=None,
        description="Model override. Ignored by adapters whose naming convention it does not match.",
    )
    image: str | None = Field(
        default=None,
        description="Base64 image (or data URL) for the trailing user turn. Only Gemini reads it.",
    )

    def to_messages(self) -> list[dict[str, Any]]:
        """Return the provider-neutral message list (OpenAI chat format)."""
        messages: list[dict[str, Any]] = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.extend({"role": m.role, "content": m.content} for m in self.history)
        messages.append({"role": "user", "content": self.prompt})
        return messages


class TokenUsage(BaseModel):
    """Token counts reported by a provider. All zeros when unreported."""

    model_config = ConfigDict(frozen=True)

    prompt: int = Field(default=0, ge=0)
    completion: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return self.prompt + self.completion


class CompletionResponse(BaseModel):
    """
    The result returned to the caller after a successful completion.
    """

    content: str = Field(..., description="The completion text.")
    provider: ProviderName = Field(..., description="Provider that served the request.")
    model: str = Field(..., description="Model string used.")
    tokens: TokenUsage = Field(default_factory=TokenUsage)
    estimated_cost_usd: float = Field(default=0.0, ge=0.0)
    latency_ms: float = Field(default=0.0, description="Latency of the successful call.")
    attempts: int = Field(
        default=1,
        description="Number of providers tried, including the successful one.",
    )


class ProviderConfig(BaseModel):
    """
    Configuration for a single provider family.

    Read once at start-up and never mutated. A provider without a key is
    skipped during fallback and never attempted.
    """

    model_config = ConfigDict(frozen=True)

    name: ProviderName
    api_key: str | None = Field(default=None, repr=False)
    model: str | None = Field(
        default=None,
        description="Replaces the adapter's built-in default model.",
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class ModelPricing(BaseModel):
    """Price row for one model, in USD per million tokens."""

    model_config = ConfigDict(frozen=True)

    input_per_million: float = Field(..., ge=0.0)
    output_per_million: float = Field(..., ge=0.0)


class ProviderFailure(BaseModel):
    """One failed attempt in a fallback chain."""

    model_config = ConfigDict(frozen=True)

    provider: str
    message: str


class RouteEvent(BaseModel):
    """
    Fired after every successful completion via the optional on_route callback.
    Forward it to usage tracking, audit logging, or metrics.
    """

    provider: ProviderName
    model: str
    tokens: TokenUsage
    estimated_cost_usd: float
    latency_ms: float
    attempt_number: int
    timestamp: float = Field(default_factory=time.time)
