# ai_router/__init__.py
"""
ai-router: AI provider routing with cross-provider fallback.

Public API surface:
  AIRouter              main class; complete() / chat() / stream()
  RouterConfig          resolved configuration (dict, YAML or environment)
  CompletionRequest     request model passed to complete() / stream()
  CompletionResponse    response model returned by complete()
  ChatMessage           one prior conversation turn
  TokenUsage            prompt / completion / total token counts
  ProviderConfig        per-provider config used in RouterConfig
  RouteEvent            event fired by the on_route callback
  AssistantTasks        contract, email, document and meeting helpers
  Parsed / FallbackRaw  best-effort structured extraction results
  AllProvidersFailed    raised when every configured provider fails
  NoProvidersConfigured raised when no provider has an API key
  ProviderCallError     raised by an adapter (and by stream()) on failure
"""

from .assistant import AssistantTasks
from .config import RouterConfig
from .engine import (
    estimate_cost,
    estimate_prompt_cost,
    estimate_request_cost,
    recommended_model,
    select_provider,
)
from .exceptions import (
    AIRouterError,
    AllProvidersFailed,
    NoProvidersConfigured,
    ProviderCallError,
    ProviderError,
    ProviderNotConfigured,
)
from .models import (
    ChatMessage,
    CompletionRequest,
    CompletionResponse,
    ModelPricing,
    ProviderConfig,
    ProviderFailure,
    RouteEvent,
    TokenUsage,
)
from .router import AIRouter
from .structured import FallbackRaw, Parsed

__all__ = [
    "AIRouter",
    "RouterConfig",
    "AssistantTasks",
    "CompletionRequest",
    "CompletionResponse",
    "ChatMessage",
    "TokenUsage",
    "ProviderConfig",
    "ProviderFailure",
    "ModelPricing",
    "RouteEvent",
    "Parsed",
    "FallbackRaw",
    "estimate_cost",
    "estimate_prompt_cost",
    "estimate_request_cost",
    "recommended_model",
    "select_provider",
    "AIRouterError",
    "AllProvidersFailed",
    "NoProvidersConfigured",
    "ProviderCallError",
    "ProviderError",
    "ProviderNotConfigured",
]

__version__ = "0.1.0"
