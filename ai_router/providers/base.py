# ai_router/providers/base.py
"""
BaseProvider: abstract contract every provider adapter must implement.

An adapter wraps one provider SDK client and exposes a uniform interface to
the router. The router never calls provider SDKs directly; it always goes
through an adapter.

This design means:
  - Provider-specific request/response mapping is contained inside each adapter.
  - Every upstream failure reaches the router as a ProviderCallError, so the
    router doesn't need to know about 429 vs ConnectionError vs
    provider-specific status codes.
  - Adding a new provider requires only implementing chat() and stream_chat().
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from ..engine.pricing import estimate_cost
from ..exceptions import ProviderCallError, ProviderError, ProviderNotConfigured
from ..models import CompletionRequest, CompletionResponse, TokenUsage


class BaseProvider(ABC):
    """
    Abstract base class for all provider adapters.

    Attributes
    ----------
    name:
        Provider identifier, e.g. "openai", "anthropic".
    default_model:
        Model used when the request carries no matching override.
    model_prefixes:
        Naming convention of this provider's models. A request's model
        override is honoured only if it starts with one of these.
    """

    name: str = ""
    default_model: str = ""
    model_prefixes: tuple[str, ...] = ()

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        if model:
            self.default_model = model
        self._client = client
        self._owns_client = False

    @property
    def is_configured(self) -> bool:
        """True when a non-blank API key (or a pre-built client) is present."""
        return self._client is not None or bool(self.api_key and self.api_key.strip())

    def resolve_model(self, override: str | None) -> str:
        """Return *override* if it follows this provider's naming, else the default."""
        if override and override.startswith(self.model_prefixes):
            return override
        return self.default_model

    # ------------------------------------------------------------------
    # Uniform interface used by the router
    # ------------------------------------------------------------------

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Run *request* as exactly one upstream call.

        Raises
        ------
        ProviderNotConfigured
            Before any network work, if there is no API key.
        ProviderCallError
            For any failure of the upstream call. Never retried here.
        """
        if not self.is_configured:
            raise ProviderNotConfigured(self.name)

        model = self.resolve_model(request.model)
        t0 = time.monotonic()
        try:
            content, prompt_tokens, completion_tokens = await self.chat(
                messages=self.build_messages(request),
                model=model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderCallError(self.name, _describe(exc)) from exc

        return CompletionResponse(
            content=content,
            provider=self.name,  # type: ignore[arg-type]
            model=model,
            tokens=TokenUsage(prompt=prompt_tokens, completion=completion_tokens),
            estimated_cost_usd=estimate_cost(model, prompt_tokens, completion_tokens),
            latency_ms=(time.monotonic() - t0) * 1000,
        )

    async def stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """
        Run *request* as one streaming connection, yielding text chunks in
        the order the provider emits them.

        Same exception semantics as complete().
        """
        if not self.is_configured:
            raise ProviderNotConfigured(self.name)

        model = self.resolve_model(request.model)
        try:
            async for chunk in self.stream_chat(
                messages=self.build_messages(request),
                model=model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            ):
                yield chunk
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderCallError(self.name, _describe(exc)) from exc

    # ------------------------------------------------------------------
    # Native hooks implemented by each adapter
    # ------------------------------------------------------------------

    def build_messages(self, request: CompletionRequest) -> list[dict[str, Any]]:
        """
        Return the messages handed to chat() and stream_chat().

        Text only by default, so adapters without vision support ignore
        ``request.image``.
        """
        return request.to_messages()

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, int, int]:
        """
        Send a non-streaming chat request.

        Parameters
        ----------
        messages:
            List of message dicts in the standard OpenAI format. An optional
            system message comes first, history follows in order, and the
            last entry is the user prompt.
        model:
            Already-resolved model string.
        max_tokens:
            Maximum completion tokens.
        temperature:
            Sampling temperature.

        Returns
        -------
        (content, prompt_tokens, completion_tokens)
            Token counts are 0 when the provider does not report usage.
        """

    async def stream_chat(  # type: ignore
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> AsyncIterator[str]:
        """Send a streaming chat request, yielding text chunks as they arrive."""
        raise NotImplementedError("Subclasses must implement stream_chat()")
        yield  # pragma: no cover

    async def close(self) -> None:
        """Release any resources held by this adapter (HTTP clients, etc.)."""

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"{self.__class__.__name__}("
            f"name={self.name!r}, default_model={self.default_model!r}, "
            f"configured={self.is_configured})"
        )


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
