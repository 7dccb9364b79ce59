# ai_router/providers/gemini.py
"""
Google Gemini provider adapter.

Wraps google-generativeai. Supports BYOC: pass any object exposing a
``GenerativeModel(model_name, system_instruction=...)`` factory (the
configured ``google.generativeai`` module is the default).

Message format conversion
-------------------------
Converts the standard OpenAI-style messages list to Gemini's contents
format (role + parts): assistant turns become role "model", the system
message becomes the model's system_instruction, and the last user turn is
sent as the new message on top of the chat history.

Usage metadata
--------------
Token counts are read from ``usage_metadata`` when the SDK returns it.
When it is absent the adapter reports zero tokens (and so zero cost).

Images
------
Gemini is the only vision-capable adapter. ``CompletionRequest.image``
(plain base64 or a ``data:<mime>;base64,...`` URL) is decoded and sent as an
inline-data part after the text of the trailing user turn.
"""

from __future__ import annotations

import base64
from collections.abc import AsyncIterator
from typing import Any

from .base import BaseProvider
from ..constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_IMAGE_MIME_TYPE,
    GEMINI,
    GEMINI_MODEL_PREFIXES,
)
from ..models import CompletionRequest


class GeminiProvider(BaseProvider):
    """Adapter wrapping google.generativeai.GenerativeModel."""

    name = GEMINI
    default_model = DEFAULT_GEMINI_MODEL
    model_prefixes = GEMINI_MODEL_PREFIXES

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                import google.generativeai as genai  # type: ignore[import]
            except ImportError as exc:
                raise ImportError(
                    "google-generativeai is required for GeminiProvider. "
                    "Install it with: pip install google-generativeai"
                ) from exc
            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    def build_messages(self, request: CompletionRequest) -> list[dict[str, Any]]:
        messages = request.to_messages()
        if request.image:
            messages[-1] = {**messages[-1], "image": request.image}
        return messages

    @staticmethod
    def _image_part(image: str) -> dict[str, Any]:
        """Decode a base64 image or data URL into an inline-data part."""
        mime_type = DEFAULT_IMAGE_MIME_TYPE
        data = image
        if image.startswith("data:") and "," in image:
            header, data = image.split(",", 1)
            mime_type = header[len("data:"):].split(";", 1)[0] or DEFAULT_IMAGE_MIME_TYPE
        return {"mime_type": mime_type, "data": base64.b64decode(data)}

    @staticmethod
    def _to_gemini_messages(
        messages: list[dict[str, Any]]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Convert OpenAI-style messages to Gemini format."""
        system_parts: list[str] = []
        history: list[dict[str, Any]] = []

        for msg in messages:
            role = msg.get("role", "user")
            content = msg.get("content", "")
            if role == "system":
                system_parts.append(content)
            elif role == "assistant":
                history.append({"role": "model", "parts": [content]})
            else:
                parts: list[Any] = [content]
                if msg.get("image"):
                    parts.append(GeminiProvider._image_part(msg["image"]))
                history.append({"role": "user", "parts": parts})

        system_instruction = "\n".join(system_parts) if system_parts else None
        return system_instruction, history

    def _start_chat(
        self,
        messages: list[dict[str, Any]],
        model: str,
    ) -> tuple[Any, list[Any]]:
        system_instruction, history = self._to_gemini_messages(messages)
        # The last user message is the prompt; everything before is history
        prompt_parts = history[-1]["parts"] if history else [""]
        generative_model = self.client.GenerativeModel(
            model,
            system_instruction=system_instruction,
        )
        return generative_model.start_chat(history=history[:-1]), prompt_parts

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, int, int]:
        chat, prompt_parts = self._start_chat(messages, model)
        response = await chat.send_message_async(
            prompt_parts,
            generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
        )
        content = response.text or ""
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return content, 0, 0
        input_tokens = getattr(usage, "prompt_token_count", 0) or 0
        output_tokens = getattr(usage, "candidates_token_count", 0) or 0
        return content, input_tokens, output_tokens

    async def stream_chat(  # type: ignore
        self,
        messages: list[dict[str, Any]],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> AsyncIterator[str]:
        chat, prompt_parts = self._start_chat(messages, model)
        response = await chat.send_message_async(
            prompt_parts,
            generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
            stream=True,
        )
        async for chunk in response:
            if chunk.text:
                yield chunk.text
