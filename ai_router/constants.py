# ai_router/constants.py
"""
Default constants for the AI router.
All tunable values are centralised here so they can be overridden via RouterConfig
without touching internal logic.
"""

# ---------------------------------------------------------------------------
# Provider identifiers
# ---------------------------------------------------------------------------
OPENAI: str = "openai"
ANTHROPIC: str = "anthropic"
GEMINI: str = "gemini"
AUTO: str = "auto"

VALID_PROVIDERS = frozenset({OPENAI, ANTHROPIC, GEMINI})

DEFAULT_PRIORITY: tuple[str, ...] = (ANTHROPIC, OPENAI, GEMINI)
"""Global fallback order, tried after the selected provider."""

PROVIDER_LABELS: dict[str, str] = {
    ANTHROPIC: "Claude (Anthropic)",
    OPENAI: "GPT-4 (OpenAI)",
    GEMINI: "Gemini (Google)",
}

# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------
API_KEY_ENV_VARS: dict[str, tuple[str, ...]] = {
    ANTHROPIC: ("ANTHROPIC_API_KEY",),
    OPENAI: ("OPENAI_API_KEY",),
    GEMINI: (
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "VITE_GEMINI_API_KEY",
        "NEXT_PUBLIC_GEMINI_API_KEY",
    ),
}

ENV_PRIORITY: str = "AI_ROUTER_PRIORITY"
ENV_TIMEOUT: str = "AI_ROUTER_TIMEOUT_SECONDS"

# ---------------------------------------------------------------------------
# Request defaults
# ---------------------------------------------------------------------------
DEFAULT_MAX_TOKENS: int = 2000
DEFAULT_TEMPERATURE: float = 0.7
ANTHROPIC_MAX_TEMPERATURE: float = 1.0

REQUEST_TIMEOUT_SECONDS: float = 60.0
"""Upper bound on a single adapter call (or a single stream chunk)."""

DEFAULT_IMAGE_MIME_TYPE: str = "image/png"
IMAGE_PROVIDER: str = GEMINI
"""Only provider that receives request images; the others ignore them."""

# ---------------------------------------------------------------------------
# Default model strings (used when no matching override is given)
# ---------------------------------------------------------------------------
DEFAULT_OPENAI_MODEL: str = "gpt-4o"
DEFAULT_ANTHROPIC_MODEL: str = "claude-sonnet-4-5-20250929"
DEFAULT_GEMINI_MODEL: str = "gemini-1.5-pro"

OPENAI_MODEL_PREFIXES: tuple[str, ...] = ("gpt-", "o1", "o3", "o4", "chatgpt-")
ANTHROPIC_MODEL_PREFIXES: tuple[str, ...] = ("claude-",)
GEMINI_MODEL_PREFIXES: tuple[str, ...] = ("gemini-",)

# ---------------------------------------------------------------------------
# Provider selection heuristics
# ---------------------------------------------------------------------------
LONG_PROMPT_THRESHOLD: int = 10_000
"""Prompts longer than this (in characters) go to the analytical provider."""

ANALYTICAL_PROVIDER: str = ANTHROPIC
GENERATIVE_PROVIDER: str = OPENAI

ANALYTICAL_KEYWORDS: tuple[str, ...] = (
    "analyze",
    "analyse",
    "reason",
    "explain",
    "code",
    "legal",
    "contract",
    "compliance",
    "review",
)

GENERATIVE_KEYWORDS: tuple[str, ...] = (
    "write",
    "create",
    "generate",
    "json",
    "summarize",
    "summarise",
    "draft",
    "translate",
)

# ---------------------------------------------------------------------------
# Pricing (USD per million tokens)
# ---------------------------------------------------------------------------
DEFAULT_INPUT_PRICE_PER_MILLION: float = 3.0
DEFAULT_OUTPUT_PRICE_PER_MILLION: float = 15.0

# ---------------------------------------------------------------------------
# User-facing fallbacks
# ---------------------------------------------------------------------------
UNAVAILABLE_MESSAGE: str = (
    "The assistant is currently unavailable. Please try again in a moment."
)
BUSY_MESSAGE: str = (
    "I'm experiencing very high traffic right now and my response capacity is "
    "temporarily limited. Please try asking your question again in about a minute."
)
CAPACITY_ERROR_MARKERS: tuple[str, ...] = ("429", "quota", "capacity", "rate limit")
DEFAULT_REPLY_SUGGESTION: str = "Thank you for your message. I'll get back to you shortly."
MAX_REPLY_SUGGESTIONS: int = 3
