# ai_router/exceptions.py
"""
Custom exceptions for ai-router.

All public exceptions inherit from AIRouterError so callers can catch
the whole family with a single except clause if preferred.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ProviderFailure


class AIRouterError(Exception):
    """Base exception for all router errors."""


class ProviderError(AIRouterError):
    """
    Base class for failures attributable to a single provider.

    Attributes
    ----------
    provider:
        Name of the provider that failed.
    reason:
        The underlying failure message, without the provider prefix.
    """

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class ProviderNotConfigured(ProviderError):
    """Raised by an adapter asked to run without an API key."""

    def __init__(self, provider: str) -> None:
        super().__init__(provider, f"{provider} API key not configured")


class ProviderCallError(ProviderError):
    """
    Raised by an adapter when its single upstream call fails.

    Network errors, timeouts, authentication failures and malformed
    responses all surface as this one type; the original exception is
    chained as ``__cause__``.
    """


class AllProvidersFailed(AIRouterError):
    """
    Raised when every configured provider in the fallback chain failed.

    The message lists each failure on its own line, in attempt order.

    Attributes
    ----------
    failures:
        ProviderFailure entries, in attempt order.
    """

    header = "All AI providers failed:"

    def __init__(self, failures: list[ProviderFailure]) -> None:
        self.failures = failures
        lines = [self.header] + [f"{f.provider}: {f.message}" for f in failures]
        super().__init__("\n".join(lines))

    @property
    def attempts(self) -> int:
        return len(self.failures)


class NoProvidersConfigured(AllProvidersFailed):
    """Raised when no provider has an API key, so nothing could be attempted."""

    def __init__(self) -> None:
        super().__init__([])
        self.args = (f"{self.header}\nNo AI provider is configured",)
