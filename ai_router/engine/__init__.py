from .estimator import estimate_prompt_cost, estimate_request_cost, estimate_tokens
from .pricing import DEFAULT_PRICING, MODEL_PRICING, estimate_cost, get_pricing
from .selector import classify_prompt, recommended_model, select_provider

__all__ = [
    "estimate_prompt_cost",
    "estimate_request_cost",
    "estimate_tokens",
    "DEFAULT_PRICING",
    "MODEL_PRICING",
    "estimate_cost",
    "get_pricing",
    "classify_prompt",
    "recommended_model",
    "select_provider",
]
