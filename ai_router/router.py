# ai_router/router.py
"""
AIRouter: the primary class the application interacts with.

Built once at start-up from a RouterConfig and passed to request handlers.
It holds no per-request state, so one instance serves concurrent requests.

complete() pipeline:
  1. Select the provider for the first attempt (explicit override or heuristics).
  2. Build the attempt order: selected provider, then the global priority
     list, each provider once, providers without an API key dropped.
  3. Call each adapter in turn, one at a time, each under a timeout.
  4. Return the first response that did not raise; otherwise raise
     AllProvidersFailed listing every failure in attempt order.

stream() uses the same selection but serves a stream from exactly one
provider. There is no fallback for streams: a caller always knows which
single provider served (or failed) a given stream.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Iterable
from typing import Any

from .config import RouterConfig
from .constants import PROVIDER_LABELS
from .engine.estimator import estimate_request_cost
from .engine.selector import select_provider
from .exceptions import (
    AllProvidersFailed,
    NoProvidersConfigured,
    ProviderCallError,
    ProviderError,
)
from .models import (
    ChatMessage,
    CompletionRequest,
    CompletionResponse,
    ProviderFailure,
    RouteEvent,
)
from .providers.base import BaseProvider
from .providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class AIRouter:
    """
    Provider routing with sequential cross-provider fallback.

    Parameters
    ----------
    config:
        Resolved router configuration. Use one of the factory class methods
        (from_dict, from_yaml, from_env) for convenient construction.
    adapters:
        Optional pre-built adapters (BYOC clients or test doubles). Each one
        replaces the adapter the config would create for its provider.
    """

    def __init__(
        self,
        config: RouterConfig,
        adapters: Iterable[BaseProvider] = (),
    ) -> None:
        self._config = config
        self._registry = ProviderRegistry.from_config(config, adapters)
        logger.info(
            "AI router initialized: configured=%s priority=%s",
            [p.name for p in self._registry.configured()],
            config.priority,
        )

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> "AIRouter":
        """Construct from a plain Python dictionary."""
        adapters = kwargs.pop("adapters", ())
        return cls(RouterConfig.from_dict(data, **kwargs), adapters)

    @classmethod
    def from_yaml(cls, path: str, **kwargs: Any) -> "AIRouter":
        """Construct from a YAML config file."""
        adapters = kwargs.pop("adapters", ())
        return cls(RouterConfig.from_yaml(path, **kwargs), adapters)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AIRouter":
        """Construct from environment variables."""
        adapters = kwargs.pop("adapters", ())
        return cls(RouterConfig.from_env(**kwargs), adapters)

    @property
    def config(self) -> RouterConfig:
        return self._config

    # ------------------------------------------------------------------
    # Provider discovery
    # ------------------------------------------------------------------

    def select_provider(self, request: CompletionRequest) -> str:
        """Return the provider the first attempt for *request* goes to."""
        return select_provider(request)

    def attempt_order(self, primary: str) -> list[BaseProvider]:
        """
        Return the adapters to try, in order, when *primary* was selected.

        *primary* comes first, then the global priority list. Each provider
        appears once; providers without an API key are left out.
        """
        order: list[BaseProvider] = []
        for name in [primary, *self._config.priority]:
            provider = self._registry.get(name)
            if provider is None or provider in order or not provider.is_configured:
                continue
            order.append(provider)
        return order

    def available_providers(self) -> dict[str, bool]:
        """Return ``{provider name: configured?}`` for every provider."""
        return self._registry.available()

    def primary_provider(self) -> str | None:
        """Return the first configured provider in priority order, if any."""
        order = self.attempt_order(self._config.priority[0]) if self._config.priority else []
        return order[0].name if order else None

    def primary_provider_label(self) -> str:
        """Return a display label for the primary provider."""
        primary = self.primary_provider()
        if primary is None:
            return "No AI provider configured"
        return PROVIDER_LABELS.get(primary, primary)

    def estimate_cost(self, request: CompletionRequest) -> float:
        """
        Upper-bound USD cost of *request* on the provider that would get the
        first attempt, using the model that provider would resolve.
        """
        primary = self.select_provider(request)
        providers = self.attempt_order(primary)
        provider = providers[0] if providers else self._registry.get(primary)
        model = provider.resolve_model(request.model) if provider else request.model or ""
        return estimate_request_cost(request, model)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Complete *request* with the first provider that succeeds.

        Success means the adapter call did not raise; an empty response is
        still a success and ends the chain.

        Raises
        ------
        NoProvidersConfigured
            No provider has an API key.
        AllProvidersFailed
            Every configured provider was tried and failed. The message has
            one line per failure, in attempt order.
        """
        primary = self.select_provider(request)
        providers = self.attempt_order(primary)
        if not providers:
            logger.error("No AI provider is configured")
            raise NoProvidersConfigured()

        failures: list[ProviderFailure] = []
        for attempt_number, provider in enumerate(providers, start=1):
            logger.info(
                "Attempting %s (attempt %d/%d)", provider.name, attempt_number, len(providers)
            )
            try:
                response = await self._with_timeout(provider.complete(request))
            except Exception as exc:
                message = _failure_message(exc, self._config.request_timeout_seconds)
                logger.warning("%s failed: %s", provider.name, message)
                failures.append(ProviderFailure(provider=provider.name, message=message))
                continue

            logger.info(
                "%s succeeded: model=%s tokens=%d cost=$%.6f",
                provider.name,
                response.model,
                response.tokens.total,
                response.estimated_cost_usd,
            )
            response = response.model_copy(update={"attempts": attempt_number})
            await self._fire_on_route(response, attempt_number)
            return response

        error = AllProvidersFailed(failures)
        logger.error("%s", error)
        raise error

    async def chat(
        self,
        history: Iterable[ChatMessage | dict[str, Any]],
        message: str,
        image: str | None = None,
        **options: Any,
    ) -> CompletionResponse:
        """
        Continue a conversation.

        *history* is forwarded verbatim and in order, followed by *message*
        as the trailing user turn. *image* (base64 or data URL) is attached to
        that turn for Gemini; other providers answer from the text alone.
        *options* are any other CompletionRequest fields (system_prompt,
        provider, model, max_tokens, temperature).
        """
        request = CompletionRequest(
            prompt=message,
            history=[ChatMessage.model_validate(m) for m in history],
            image=image,
            **options,
        )
        return await self.complete(request)

    async def stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """
        Stream *request* from a single provider.

        The selected provider serves the stream when it is configured,
        otherwise the first configured provider in priority order. Errors,
        whether before the first chunk or mid-stream, propagate to the caller
        and no other provider is attempted.
        """
        primary = self.select_provider(request)
        providers = self.attempt_order(primary)
        if not providers:
            logger.error("No AI provider is configured")
            raise NoProvidersConfigured()

        provider = providers[0]
        logger.info("Streaming from %s", provider.name)
        chunks = provider.stream(request).__aiter__()
        try:
            while True:
                try:
                    chunk = await self._with_timeout(chunks.__anext__())
                except StopAsyncIteration:
                    break
                except asyncio.TimeoutError as exc:
                    raise ProviderCallError(
                        provider.name,
                        _failure_message(exc, self._config.request_timeout_seconds),
                    ) from exc
                yield chunk
        except Exception as exc:
            logger.warning(
                "%s stream failed: %s",
                provider.name,
                _failure_message(exc, self._config.request_timeout_seconds),
            )
            raise
        finally:
            aclose = getattr(chunks, "aclose", None)
            if aclose is not None:
                await aclose()

    async def close(self) -> None:
        """Release all resources (HTTP clients)."""
        await self._registry.close_all()

    async def __aenter__(self) -> "AIRouter":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _with_timeout(self, awaitable: Any) -> Any:
        timeout = self._config.request_timeout_seconds
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout)

    async def _fire_on_route(self, response: CompletionResponse, attempt_number: int) -> None:
        if not self._config.on_route:
            return
        event = RouteEvent(
            provider=response.provider,
            model=response.model,
            tokens=response.tokens,
            estimated_cost_usd=response.estimated_cost_usd,
            latency_ms=response.latency_ms,
            attempt_number=attempt_number,
        )
        try:
            await self._config.on_route(event)
        except Exception:
            # Callback errors must not affect routing
            logger.exception("on_route callback failed")


def _failure_message(exc: BaseException, timeout: float | None) -> str:
    if isinstance(exc, ProviderError):
        return exc.reason
    if isinstance(exc, asyncio.TimeoutError):
        return f"timed out after {timeout}s"
    return str(exc) or type(exc).__name__
