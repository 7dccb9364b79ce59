# ai_router/engine/pricing.py
"""
Static price table and cost accounting.

Prices are USD per million tokens. Lookups try the exact model string first,
then the longest listed prefix (so dated snapshots such as
``claude-sonnet-4-5-20250929`` resolve to their family row), then fall back
to DEFAULT_PRICING.

Costs are not rounded: (100 x 3 + 50 x 15) / 1_000_000 is exactly 0.00105.
"""

from __future__ import annotations

from ..constants import DEFAULT_INPUT_PRICE_PER_MILLION, DEFAULT_OUTPUT_PRICE_PER_MILLION
from ..models import ModelPricing

DEFAULT_PRICING = ModelPricing(
    input_per_million=DEFAULT_INPUT_PRICE_PER_MILLION,
    output_per_million=DEFAULT_OUTPUT_PRICE_PER_MILLION,
)

MODEL_PRICING: dict[str, ModelPricing] = {
    # Anthropic
    "claude-opus-4": ModelPricing(input_per_million=15.0, output_per_million=75.0),
    "claude-sonnet-4-5": ModelPricing(input_per_million=3.0, output_per_million=15.0),
    "claude-sonnet-4": ModelPricing(input_per_million=3.0, output_per_million=15.0),
    "claude-haiku-4-5": ModelPricing(input_per_million=1.0, output_per_million=5.0),
    "claude-3-5-haiku": ModelPricing(input_per_million=0.8, output_per_million=4.0),
    # OpenAI
    "gpt-4o": ModelPricing(input_per_million=2.5, output_per_million=10.0),
    "gpt-4o-mini": ModelPricing(input_per_million=0.15, output_per_million=0.6),
    "gpt-4-turbo": ModelPricing(input_per_million=10.0, output_per_million=30.0),
    "gpt-4.1": ModelPricing(input_per_million=2.0, output_per_million=8.0),
    "gpt-4.1-mini": ModelPricing(input_per_million=0.4, output_per_million=1.6),
    # Gemini
    "gemini-1.5-pro": ModelPricing(input_per_million=1.25, output_per_million=5.0),
    "gemini-1.5-flash": ModelPricing(input_per_million=0.075, output_per_million=0.3),
    "gemini-2.0-flash": ModelPricing(input_per_million=0.1, output_per_million=0.4),
}


def get_pricing(model: str) -> ModelPricing:
    """Return the price row for *model*, falling back to DEFAULT_PRICING."""
    if model in MODEL_PRICING:
        return MODEL_PRICING[model]
    matches = [name for name in MODEL_PRICING if model.startswith(name)]
    if matches:
        return MODEL_PRICING[max(matches, key=len)]
    return DEFAULT_PRICING


def estimate_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
    """
    Convert token usage into an estimated USD cost.

    Parameters
    ----------
    model:
        Model string the tokens were billed against.
    prompt_tokens / completion_tokens:
        Token counts reported by the provider.
    """
    pricing = get_pricing(model)
    return (
        prompt_tokens * pricing.input_per_million
        + completion_tokens * pricing.output_per_million
    ) / 1_000_000
