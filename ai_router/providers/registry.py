# ai_router/providers/registry.py
"""
ProviderRegistry: the set of provider adapters known to one router.

The registry is built once from a RouterConfig and is read-only afterwards,
so concurrent requests can share it without locking. It holds one adapter
per provider family, configured or not; the router asks it which ones have
an API key.
"""

from __future__ import annotations

from collections.abc import Iterable

from .base import BaseProvider
from .openai import OpenAIProvider
from .anthropic import AnthropicProvider
from .gemini import GeminiProvider
from ..config import RouterConfig
from ..constants import VALID_PROVIDERS

# Map provider name → adapter class
_ADAPTER_MAP: dict[str, type[BaseProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}


class ProviderRegistry:
    """Holds the adapters for every supported provider."""

    def __init__(self, adapters: Iterable[BaseProvider] = ()) -> None:
        self._providers: dict[str, BaseProvider] = {}
        for adapter in adapters:
            if adapter.name not in VALID_PROVIDERS:
                raise ValueError(
                    f"Unknown provider '{adapter.name}'. "
                    f"Supported providers: {sorted(VALID_PROVIDERS)}."
                )
            self._providers[adapter.name] = adapter

    @classmethod
    def from_config(
        cls,
        config: RouterConfig,
        adapters: Iterable[BaseProvider] = (),
    ) -> "ProviderRegistry":
        """
        Build one adapter per provider family from *config*.

        Pre-built *adapters* (BYOC clients, test doubles) replace the adapter
        the config would otherwise create for the same provider.
        """
        registry = cls(adapters)
        for name, adapter_cls in _ADAPTER_MAP.items():
            if name in registry._providers:
                continue
            provider_cfg = config.provider(name)
            registry._providers[name] = adapter_cls(
                api_key=provider_cfg.api_key,
                model=provider_cfg.model,
            )
        return registry

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get(self, name: str) -> BaseProvider | None:
        """Return provider by name, or None if not registered."""
        return self._providers.get(name)

    def configured(self) -> list[BaseProvider]:
        """Return adapters that have an API key."""
        return [p for p in self._providers.values() if p.is_configured]

    def available(self) -> dict[str, bool]:
        """Return ``{provider name: configured?}`` for every provider."""
        return {name: p.is_configured for name, p in self._providers.items()}

    def names(self) -> list[str]:
        return list(self._providers)

    async def close_all(self) -> None:
        """Call close() on every provider (releases HTTP connections, etc.)."""
        for provider in self._providers.values():
            await provider.close()
