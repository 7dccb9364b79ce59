# ai_router/providers/openai.py
"""
OpenAI provider adapter.

Wraps an AsyncOpenAI client. The registry builds this adapter either:
  a) from ProviderConfig.api_key (the adapter creates its own client on
     first use), or
  b) with a pre-configured client passed in (BYOC mode).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, cast

import httpx

from .base import BaseProvider
from ..constants import DEFAULT_OPENAI_MODEL, OPENAI, OPENAI_MODEL_PREFIXES


class OpenAIProvider(BaseProvider):
    """Adapter wrapping openai.AsyncOpenAI."""

    name = OPENAI
    default_model = DEFAULT_OPENAI_MODEL
    model_prefixes = OPENAI_MODEL_PREFIXES

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                import openai  # type: ignore[import]
            except ImportError as exc:
                raise ImportError(
                    "openai package is required for OpenAIProvider. "
                    "Install it with: pip install openai"
                ) from exc
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key,
                http_client=httpx.AsyncClient(
                    limits=httpx.Limits(max_connections=100, max_keepalive_connections=20)
                ),
            )
            self._owns_client = True
        return self._client

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, int, int]:
        response = await self.client.chat.completions.create(
            model=model,
            messages=cast(list, messages),
            max_tokens=max_tokens,
            temperature=temperature,
        )
        content = response.choices[0].message.content or ""
        usage = response.usage
        if usage is None:
            return content, 0, 0
        return content, usage.prompt_tokens, usage.completion_tokens

    async def stream_chat(  # type: ignore
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> AsyncIterator[str]:
        stream = await self.client.chat.completions.create(
            model=model,
            messages=cast(list, messages),
            max_tokens=max_tokens,
            temperature=temperature,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    async def close(self) -> None:
        if self._owns_client:
            await self._client.close()
