# ai_router/providers/anthropic.py
"""
Anthropic provider adapter.

Wraps an AsyncAnthropic client. Supports BYOC (pass an existing client)
or creates its own client from api_key on first use.

Notes on message format
-----------------------
Anthropic's API separates the system message from the messages list and
caps temperature at 1.0. This adapter handles both so the router can use
the uniform OpenAI-style messages format throughout.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx

from .base import BaseProvider
from ..constants import (
    ANTHROPIC,
    ANTHROPIC_MAX_TEMPERATURE,
    ANTHROPIC_MODEL_PREFIXES,
    DEFAULT_ANTHROPIC_MODEL,
)


class AnthropicProvider(BaseProvider):
    """Adapter wrapping anthropic.AsyncAnthropic."""

    name = ANTHROPIC
    default_model = DEFAULT_ANTHROPIC_MODEL
    model_prefixes = ANTHROPIC_MODEL_PREFIXES

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                import anthropic  # type: ignore[import]
            except ImportError as exc:
                raise ImportError(
                    "anthropic package is required for AnthropicProvider. "
                    "Install it with: pip install anthropic"
                ) from exc
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                http_client=httpx.AsyncClient(
                    limits=httpx.Limits(max_connections=100, max_keepalive_connections=20)
                ),
            )
            self._owns_client = True
        return self._client

    @staticmethod
    def _split_messages(
        messages: list[dict[str, Any]]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Extract optional system message; return (system, conversation)."""
        system: str | None = None
        filtered: list[dict[str, Any]] = []
        for msg in messages:
            if msg.get("role") == "system":
                system = msg.get("content", "")
            else:
                filtered.append(msg)
        return system, filtered

    def _build_kwargs(
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        system, filtered = self._split_messages(messages)
        call_kwargs: dict[str, Any] = {
            "model": model,
            "messages": filtered,
            "max_tokens": max_tokens,
            "temperature": min(temperature, ANTHROPIC_MAX_TEMPERATURE),
        }
        if system:
            call_kwargs["system"] = system
        return call_kwargs

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, int, int]:
        response = await self.client.messages.create(
            **self._build_kwargs(messages, model, max_tokens, temperature)
        )
        content = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        return content, response.usage.input_tokens, response.usage.output_tokens

    async def stream_chat(  # type: ignore
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> AsyncIterator[str]:
        call_kwargs = self._build_kwargs(messages, model, max_tokens, temperature)
        async with self.client.messages.stream(**call_kwargs) as stream:
            async for text in stream.text_stream:
                yield text

    async def close(self) -> None:
        if self._owns_client:
            await self._client.close()
