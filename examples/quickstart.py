# examples/quickstart.py
"""
Quickstart: AI router configured from the environment.

Set at least one of ANTHROPIC_API_KEY, OPENAI_API_KEY or GEMINI_API_KEY.

Run with:
  python examples/quickstart.py
"""

import asyncio
import logging

from ai_router import AIRouter, AllProvidersFailed, CompletionRequest


async def on_route(event):
    print(f"[route] {event.provider} attempt #{event.attempt_number} ${event.estimated_cost_usd:.6f}")


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    router = AIRouter.from_env(on_route=on_route)
    print(f"Providers: {router.available_providers()}")
    print(f"Primary:   {router.primary_provider_label()}")

    async with router:
        try:
            response = await router.complete(CompletionRequest(
                prompt="Summarise the benefits of functional programming.",
                max_tokens=400,
            ))
        except AllProvidersFailed as exc:
            print(exc)
            return

        print(f"Content:    {response.content[:200]}...")
        print(f"Provider:   {response.provider}")
        print(f"Model:      {response.model}")
        print(f"Latency:    {response.latency_ms:.1f}ms")
        print(f"Attempts:   {response.attempts}")
        print(f"Tokens:     {response.tokens.prompt} in / {response.tokens.completion} out")
        print(f"Cost:       ${response.estimated_cost_usd:.6f}")


if __name__ == "__main__":
    asyncio.run(main())
