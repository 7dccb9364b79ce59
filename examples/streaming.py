# examples/streaming.py
"""
Streaming chat completion.

A stream is served by a single provider; if it fails the error reaches
the caller and no other provider is tried.

Run with:
  python examples/streaming.py
"""

import asyncio

from ai_router import AIRouter, CompletionRequest, ProviderError


async def main():
    async with AIRouter.from_env() as router:
        request = CompletionRequest(
            prompt="Write a short poem about the ocean.",
            provider="auto",
        )
        try:
            async for chunk in router.stream(request):
                print(chunk, end="", flush=True)
        except ProviderError as exc:
            print(f"\nstream failed on {exc.provider}: {exc.reason}")
        print()


if __name__ == "__main__":
    asyncio.run(main())
