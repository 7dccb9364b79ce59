# examples/byoc.py
"""
BYOC: Bring Your Own Client.

The developer keeps their existing, fully configured SDK clients. Each one
is wrapped in an adapter and handed to the router, which adds selection and
fallback on top.

Run with:
  python examples/byoc.py
"""

import asyncio
import os

import anthropic
import openai

from ai_router import AIRouter, RouterConfig
from ai_router.providers import AnthropicProvider, OpenAIProvider


async def main():
    # Developer's existing clients, unchanged
    openai_client = openai.AsyncOpenAI(
        api_key=os.environ["OPENAI_API_KEY"],
        timeout=30,
        max_retries=0,
    )
    anthropic_client = anthropic.AsyncAnthropic(
        api_key=os.environ["ANTHROPIC_API_KEY"],
        timeout=30,
    )

    router = AIRouter(
        RouterConfig(priority=["openai", "anthropic"]),
        adapters=[
            OpenAIProvider(client=openai_client, model="gpt-4o"),
            AnthropicProvider(client=anthropic_client, model="claude-sonnet-4-5-20250929"),
        ],
    )

    # The router does not close clients it did not create
    async with router:
        response = await router.chat(
            [{"role": "user", "content": "Hi, I'm planning a trip."},
             {"role": "assistant", "content": "Great! Where to?"}],
            "Which provider am I talking to?",
        )
        print(f"Provider: {response.provider}")
        print(f"Response: {response.content}")

    await openai_client.close()
    await anthropic_client.close()


if __name__ == "__main__":
    asyncio.run(main())
