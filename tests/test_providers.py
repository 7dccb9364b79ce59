# tests/test_providers.py
"""
Unit tests for the provider adapters.

Each adapter is given a fake SDK client (BYOC) so no network calls are made.
Verifies request mapping, response/usage extraction, model override rules,
fail-fast on missing keys, and error wrapping.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from ai_router.exceptions import ProviderCallError, ProviderNotConfigured
from ai_router.models import ChatMessage, CompletionRequest
from ai_router.providers import AnthropicProvider, GeminiProvider, OpenAIProvider
from ai_router.providers.registry import ProviderRegistry
from ai_router.config import RouterConfig


async def aiter_of(items: list[Any]):
    for item in items:
        yield item


def openai_response(content: str, prompt_tokens: int, completion_tokens: int) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


def openai_chunk(delta: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=delta))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=openai_response("Hi there", 100, 50))
    return client


@pytest.fixture
def anthropic_client():
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(
            content=[SimpleNamespace(type="text", text="Clause 1. Scope.")],
            usage=SimpleNamespace(input_tokens=100, output_tokens=50),
        )
    )
    return client


class FakeAnthropicStream:
    def __init__(self, texts: list[str]) -> None:
        self.text_stream = aiter_of(texts)

    async def __aenter__(self) -> "FakeAnthropicStream":
        return self

    async def __aexit__(self, *_: Any) -> None:
        return None


class FakeGeminiResponse:
    def __init__(self, chunks: list[str]) -> None:
        self._chunks = chunks

    def __aiter__(self):
        return aiter_of([SimpleNamespace(text=c) for c in self._chunks])


class FakeGemini:
    """Stands in for the google.generativeai module."""

    def __init__(self, response: Any) -> None:
        self.response = response
        self.models: list[dict[str, Any]] = []
        self.sent: list[dict[str, Any]] = []

    def GenerativeModel(self, model_name: str, system_instruction: str | None = None):
        self.models.append({"model": model_name, "system_instruction": system_instruction})
        fake = self

        class _Chat:
            def __init__(self, history: list[dict[str, Any]]) -> None:
                self.history = history

            async def send_message_async(self, parts, generation_config=None, stream=False):
                fake.sent.append(
                    {
                        "history": self.history,
                        "parts": parts,
                        "generation_config": generation_config,
                        "stream": stream,
                    }
                )
                return fake.response

        return SimpleNamespace(start_chat=lambda history: _Chat(history))


@pytest.mark.asyncio
class TestOpenAIProvider:
    async def test_complete_maps_request_and_usage(self, openai_client):
        provider = OpenAIProvider(api_key="sk-test", client=openai_client)
        request = CompletionRequest(
            prompt="Write a tagline",
            system_prompt="You are a copywriter.",
            model="gpt-4o-mini",
            max_tokens=300,
            temperature=0.2,
        )
        response = await provider.complete(request)

        kwargs = openai_client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 300
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are a copywriter."},
            {"role": "user", "content": "Write a tagline"},
        ]
        assert response.provider == "openai"
        assert response.content == "Hi there"
        assert response.tokens.total == 150
        assert response.estimated_cost_usd == pytest.approx((100 * 0.15 + 50 * 0.6) / 1_000_000)

    async def test_foreign_model_override_falls_back_to_default(self, openai_client):
        provider = OpenAIProvider(api_key="sk-test", client=openai_client)
        response = await provider.complete(CompletionRequest(prompt="Hi", model="claude-opus-4"))
        assert response.model == "gpt-4o"

    async def test_missing_usage_reports_zero(self, openai_client):
        openai_client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=None))], usage=None
        )
        provider = OpenAIProvider(api_key="sk-test", client=openai_client)
        response = await provider.complete(CompletionRequest(prompt="Hi"))
        assert response.content == ""
        assert response.tokens.total == 0
        assert response.estimated_cost_usd == 0.0

    async def test_upstream_error_is_wrapped(self, openai_client):
        openai_client.chat.completions.create.side_effect = RuntimeError("401 invalid api key")
        provider = OpenAIProvider(api_key="sk-test", client=openai_client)
        with pytest.raises(ProviderCallError) as exc_info:
            await provider.complete(CompletionRequest(prompt="Hi"))
        assert exc_info.value.provider == "openai"
        assert exc_info.value.reason == "401 invalid api key"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert openai_client.chat.completions.create.await_count == 1

    async def test_stream_yields_deltas(self, openai_client):
        openai_client.chat.completions.create = AsyncMock(
            return_value=aiter_of(
                [openai_chunk("Hel"), openai_chunk(None), openai_chunk("lo"), SimpleNamespace(choices=[])]
            )
        )
        provider = OpenAIProvider(api_key="sk-test", client=openai_client)
        chunks = [c async for c in provider.stream(CompletionRequest(prompt="Hi"))]
        assert chunks == ["Hel", "lo"]
        assert openai_client.chat.completions.create.await_args.kwargs["stream"] is True


@pytest.mark.asyncio
class TestNotConfigured:
    @pytest.mark.parametrize("cls", [OpenAIProvider, AnthropicProvider, GeminiProvider])
    async def test_complete_fails_fast_without_key(self, cls):
        provider = cls(api_key="   ")
        with pytest.raises(ProviderNotConfigured) as exc_info:
            await provider.complete(CompletionRequest(prompt="Hi"))
        assert "not configured" in str(exc_info.value)
        # no SDK client was built
        assert provider._client is None

    @pytest.mark.parametrize("cls", [OpenAIProvider, AnthropicProvider, GeminiProvider])
    async def test_stream_fails_fast_without_key(self, cls):
        provider = cls(api_key=None)
        with pytest.raises(ProviderNotConfigured):
            async for _ in provider.stream(CompletionRequest(prompt="Hi")):
                pass
        assert provider._client is None


@pytest.mark.asyncio
class TestAnthropicProvider:
    async def test_system_prompt_is_split_out(self, anthropic_client):
        provider = AnthropicProvider(api_key="sk-ant", client=anthropic_client)
        request = CompletionRequest(
            prompt="Review clause 4",
            system_prompt="You are a legal contract expert.",
            history=[
                ChatMessage(role="user", content="Here is the contract."),
                ChatMessage(role="assistant", content="Received."),
            ],
        )
        await provider.complete(request)

        kwargs = anthropic_client.messages.create.await_args.kwargs
        assert kwargs["system"] == "You are a legal contract expert."
        assert kwargs["messages"] == [
            {"role": "user", "content": "Here is the contract."},
            {"role": "assistant", "content": "Received."},
            {"role": "user", "content": "Review clause 4"},
        ]
        assert kwargs["model"] == "claude-sonnet-4-5-20250929"

    async def test_no_system_key_without_system_prompt(self, anthropic_client):
        provider = AnthropicProvider(api_key="sk-ant", client=anthropic_client)
        await provider.complete(CompletionRequest(prompt="Hi"))
        assert "system" not in anthropic_client.messages.create.await_args.kwargs

    async def test_temperature_is_clamped(self, anthropic_client):
        provider = AnthropicProvider(api_key="sk-ant", client=anthropic_client)
        await provider.complete(CompletionRequest(prompt="Hi", temperature=1.6))
        assert anthropic_client.messages.create.await_args.kwargs["temperature"] == 1.0

    async def test_cost_uses_pricing_row(self, anthropic_client):
        provider = AnthropicProvider(api_key="sk-ant", client=anthropic_client)
        response = await provider.complete(CompletionRequest(prompt="Hi"))
        assert response.content == "Clause 1. Scope."
        assert response.tokens.prompt == 100
        assert response.tokens.completion == 50
        assert response.estimated_cost_usd == 0.00105

    async def test_configured_default_model(self, anthropic_client):
        provider = AnthropicProvider(
            api_key="sk-ant", model="claude-haiku-4-5", client=anthropic_client
        )
        response = await provider.complete(CompletionRequest(prompt="Hi"))
        assert response.model == "claude-haiku-4-5"
        assert response.estimated_cost_usd == pytest.approx((100 * 1.0 + 50 * 5.0) / 1_000_000)

    async def test_stream(self, anthropic_client):
        anthropic_client.messages.stream = MagicMock(
            return_value=FakeAnthropicStream(["Dear ", "client,"])
        )
        provider = AnthropicProvider(api_key="sk-ant", client=anthropic_client)
        chunks = [c async for c in provider.stream(CompletionRequest(prompt="Hi"))]
        assert chunks == ["Dear ", "client,"]


@pytest.mark.asyncio
class TestGeminiProvider:
    async def test_history_and_system_mapping(self):
        usage = SimpleNamespace(prompt_token_count=12, candidates_token_count=8)
        fake = FakeGemini(SimpleNamespace(text="Ciao", usage_metadata=usage))
        provider = GeminiProvider(api_key="gm", client=fake)
        request = CompletionRequest(
            prompt="And in Italian?",
            system_prompt="You are a translator.",
            history=[
                ChatMessage(role="user", content="Translate hello"),
                ChatMessage(role="assistant", content="Hola"),
            ],
            max_tokens=64,
        )
        response = await provider.complete(request)

        assert fake.models == [{"model": "gemini-1.5-pro", "system_instruction": "You are a translator."}]
        sent = fake.sent[0]
        assert sent["history"] == [
            {"role": "user", "parts": ["Translate hello"]},
            {"role": "model", "parts": ["Hola"]},
        ]
        assert sent["parts"] == ["And in Italian?"]
        assert sent["generation_config"] == {"max_output_tokens": 64, "temperature": 0.7}
        assert response.content == "Ciao"
        assert response.tokens.prompt == 12
        assert response.tokens.completion == 8

    async def test_missing_usage_metadata_reports_zero(self):
        fake = FakeGemini(SimpleNamespace(text="Ciao"))
        provider = GeminiProvider(api_key="gm", client=fake)
        response = await provider.complete(CompletionRequest(prompt="Hi"))
        assert response.tokens.total == 0
        assert response.estimated_cost_usd == 0.0

    async def test_model_override(self):
        fake = FakeGemini(SimpleNamespace(text="ok"))
        provider = GeminiProvider(api_key="gm", client=fake)
        response = await provider.complete(CompletionRequest(prompt="Hi", model="gemini-2.0-flash"))
        assert response.model == "gemini-2.0-flash"
        assert fake.models[0]["model"] == "gemini-2.0-flash"

    async def test_stream(self):
        fake = FakeGemini(FakeGeminiResponse(["Uno ", "", "due"]))
        provider = GeminiProvider(api_key="gm", client=fake)
        chunks = [c async for c in provider.stream(CompletionRequest(prompt="Count"))]
        assert chunks == ["Uno ", "due"]
        assert fake.sent[0]["stream"] is True


class TestRegistry:
    def test_from_config_builds_every_provider(self):
        config = RouterConfig.from_dict(
            {"providers": [{"name": "openai", "api_key": "sk-test", "model": "gpt-4.1"}]}
        )
        registry = ProviderRegistry.from_config(config)
        assert sorted(registry.names()) == ["anthropic", "gemini", "openai"]
        assert registry.available() == {"openai": True, "anthropic": False, "gemini": False}
        assert registry.get("openai").default_model == "gpt-4.1"
        assert [p.name for p in registry.configured()] == ["openai"]

    def test_injected_adapter_replaces_default(self, openai_client):
        adapter = OpenAIProvider(api_key="sk-byoc", client=openai_client)
        registry = ProviderRegistry.from_config(RouterConfig(), [adapter])
        assert registry.get("openai") is adapter

    def test_unknown_adapter_name_rejected(self, openai_client):
        adapter = OpenAIProvider(api_key="sk", client=openai_client)
        adapter.name = "groq"
        with pytest.raises(ValueError, match="Unknown provider"):
            ProviderRegistry([adapter])

    def test_full_config_configures_every_provider(self, full_config):
        registry = ProviderRegistry.from_config(full_config)
        assert all(registry.available().values())
        assert registry.get("anthropic").api_key == "sk-ant-test"


@pytest.mark.asyncio
class TestClientOwnership:
    async def test_byoc_client_is_not_closed(self, openai_client):
        openai_client.close = AsyncMock()
        provider = OpenAIProvider(client=openai_client)
        assert provider.is_configured
        await provider.close()
        openai_client.close.assert_not_awaited()

    async def test_unused_adapter_close_is_a_no_op(self):
        provider = AnthropicProvider(api_key="sk-ant")
        await provider.close()
        assert provider._client is None


@pytest.mark.asyncio
class TestImages:
    async def test_gemini_attaches_plain_base64_as_png(self):
        fake = FakeGemini(SimpleNamespace(text="A cat"))
        provider = GeminiProvider(api_key="gm", client=fake)
        await provider.complete(CompletionRequest(prompt="What is this?", image="aGVsbG8="))
        assert fake.sent[0]["parts"] == [
            "What is this?",
            {"mime_type": "image/png", "data": b"hello"},
        ]

    async def test_gemini_reads_mime_type_from_data_url(self):
        fake = FakeGemini(SimpleNamespace(text="A dog"))
        provider = GeminiProvider(api_key="gm", client=fake)
        request = CompletionRequest(
            prompt="Describe",
            image="data:image/jpeg;base64,aGVsbG8=",
            history=[ChatMessage(role="user", content="Earlier question")],
        )
        await provider.complete(request)
        sent = fake.sent[0]
        assert sent["parts"][1] == {"mime_type": "image/jpeg", "data": b"hello"}
        # only the trailing turn carries the image
        assert sent["history"] == [{"role": "user", "parts": ["Earlier question"]}]

    async def test_gemini_stream_attaches_image(self):
        fake = FakeGemini(FakeGeminiResponse(["ok"]))
        provider = GeminiProvider(api_key="gm", client=fake)
        chunks = [c async for c in provider.stream(CompletionRequest(prompt="Hi", image="aGVsbG8="))]
        assert chunks == ["ok"]
        assert fake.sent[0]["parts"][1]["data"] == b"hello"

    async def test_malformed_image_is_a_call_error(self):
        fake = FakeGemini(SimpleNamespace(text="unused"))
        provider = GeminiProvider(api_key="gm", client=fake)
        with pytest.raises(ProviderCallError) as exc_info:
            await provider.complete(CompletionRequest(prompt="Hi", image="abc"))
        assert exc_info.value.provider == "gemini"
        assert fake.sent == []

    async def test_openai_ignores_image(self, openai_client):
        provider = OpenAIProvider(api_key="sk-test", client=openai_client)
        await provider.complete(CompletionRequest(prompt="Hi", image="aGVsbG8="))
        messages = openai_client.chat.completions.create.await_args.kwargs["messages"]
        assert messages == [{"role": "user", "content": "Hi"}]

    async def test_anthropic_ignores_image(self, anthropic_client):
        provider = AnthropicProvider(api_key="sk-ant", client=anthropic_client)
        await provider.complete(CompletionRequest(prompt="Hi", image="aGVsbG8="))
        messages = anthropic_client.messages.create.await_args.kwargs["messages"]
        assert messages == [{"role": "user", "content": "Hi"}]
