# ai_router/assistant.py
"""
Business assistant tasks built on top of AIRouter.

Each task builds a prompt, pins the provider best suited to it (fallback
still applies), and returns plain text or a best-effort structured result.
Structured results are Parsed or FallbackRaw; read ``.value`` when any
shape will do.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from .constants import (
    BUSY_MESSAGE,
    CAPACITY_ERROR_MARKERS,
    DEFAULT_REPLY_SUGGESTION,
    MAX_REPLY_SUGGESTIONS,
    UNAVAILABLE_MESSAGE,
)
from .exceptions import AIRouterError
from .models import ChatMessage, CompletionRequest
from .router import AIRouter
from .structured import (
    DocumentAnalysis,
    EmailCampaign,
    EmailDraft,
    FallbackRaw,
    MarketingStrategy,
    MeetingSummary,
    StructuredResult,
    extract_mapping,
    extract_strings,
    extract_structured,
    first_lines,
)

logger = logging.getLogger(__name__)

_CONTRACT_MODEL = "claude-opus-4-6"
_ANALYSIS_MODEL = "claude-sonnet-4-5-20250929"
_WRITING_MODEL = "gpt-4o"


def is_capacity_error(error: BaseException) -> bool:
    """True if *error* looks like a rate-limit or overload failure."""
    text = str(error).lower()
    return any(marker in text for marker in CAPACITY_ERROR_MARKERS)


class AssistantTasks:
    """High-level AI task helpers."""

    def __init__(self, router: AIRouter) -> None:
        self._router = router

    async def _text(self, prompt: str, **options: Any) -> str:
        response = await self._router.complete(CompletionRequest(prompt=prompt, **options))
        return response.content

    async def generate_contract(
        self,
        contract_type: str,
        client_name: str,
        amount: float,
        terms: list[str],
        custom_clauses: list[str] | None = None,
    ) -> str:
        """Draft a ready-to-sign contract."""
        lines = [
            f"Generate a professional {contract_type} contract for {client_name}.",
            "",
            f"Amount: ${amount:,.2f}",
            f"Terms: {', '.join(terms)}",
        ]
        if custom_clauses:
            lines.append("Custom Clauses:\n" + "\n".join(custom_clauses))
        lines += ["", "Include all standard legal clauses and make it ready to sign."]
        return await self._text(
            "\n".join(lines),
            system_prompt="You are a legal contract expert. Generate professional, legally sound contracts.",
            provider="anthropic",
            model=_CONTRACT_MODEL,
            max_tokens=4000,
        )

    async def analyze_document(self, content: str) -> StructuredResult[DocumentAnalysis]:
        prompt = (
            "Analyze this document and extract:\n"
            "1. A brief summary\n"
            "2. Key points (bullet list)\n"
            "3. Important entities (people, companies, dates)\n"
            "4. Overall sentiment\n\n"
            f"Document:\n{content}\n\n"
            "Return as JSON with keys: summary, keyPoints, entities, sentiment"
        )
        text = await self._text(
            prompt,
            system_prompt="You are a document analysis expert. Extract structured information from documents.",
            provider="anthropic",
            model=_ANALYSIS_MODEL,
            temperature=0.3,
        )
        return extract_structured(text, DocumentAnalysis, lambda raw: DocumentAnalysis(summary=raw))

    async def draft_email(
        self,
        purpose: str,
        recipient: str,
        context: str,
        tone: str = "professional",
    ) -> StructuredResult[EmailDraft]:
        prompt = (
            f"Draft a {tone} email for:\n\n"
            f"Purpose: {purpose}\n"
            f"Recipient: {recipient}\n"
            f"Context: {context}\n\n"
            "Return as JSON with keys: subject, body"
        )
        text = await self._text(
            prompt,
            system_prompt="You are a professional email writer. Draft clear, concise, and effective emails.",
            provider="openai",
            model=_WRITING_MODEL,
        )
        return extract_structured(text, EmailDraft, lambda raw: EmailDraft(body=raw))

    async def generate_project_description(
        self,
        name: str,
        goals: list[str],
        stakeholders: list[str],
        timeline: str | None = None,
    ) -> str:
        prompt = (
            "Generate a professional project description for:\n\n"
            f"Project Name: {name}\n"
            f"Goals: {', '.join(goals)}\n"
            f"Stakeholders: {', '.join(stakeholders)}\n"
        )
        if timeline:
            prompt += f"Timeline: {timeline}\n"
        prompt += "\nMake it clear, comprehensive, and action-oriented."
        return await self._text(
            prompt,
            system_prompt="You are a project management expert. Write clear project descriptions.",
            provider="openai",
            model=_WRITING_MODEL,
        )

    async def summarize_meeting(self, notes: str) -> StructuredResult[MeetingSummary]:
        prompt = (
            f"Summarize these meeting notes:\n\n{notes}\n\n"
            "Extract:\n"
            "1. Overall summary\n"
            "2. Key decisions made\n"
            "3. Action items\n"
            "4. Next steps\n\n"
            "Return as JSON with keys: summary, decisions, actionItems, nextSteps"
        )
        text = await self._text(
            prompt,
            system_prompt="You are a meeting facilitator. Extract structured information from meeting notes.",
            provider="anthropic",
            model=_ANALYSIS_MODEL,
            temperature=0.3,
        )
        return extract_structured(text, MeetingSummary, lambda raw: MeetingSummary(summary=raw))

    async def extract_data(self, text: str, fields: list[str]) -> StructuredResult[dict[str, Any]]:
        prompt = (
            "Extract the following information from this text:\n\n"
            f"Fields to extract: {', '.join(fields)}\n\n"
            f"Text:\n{text}\n\n"
            "Return as JSON with the requested fields."
        )
        reply = await self._text(
            prompt,
            system_prompt="You are a data extraction expert. Extract structured data accurately.",
            provider="openai",
            model=_WRITING_MODEL,
            temperature=0.2,
        )
        return extract_mapping(reply)

    async def translate(self, text: str, target_language: str) -> str:
        return await self._text(
            f"Translate this text to {target_language}:\n\n{text}",
            system_prompt="You are a professional translator. Provide accurate translations.",
            provider="openai",
            model=_WRITING_MODEL,
        )

    async def suggest_reply(
        self,
        message_text: str,
        user_role: str = "client",
    ) -> StructuredResult[list[str]]:
        """
        Suggest up to three replies to an incoming message.

        Parsed when the model returns a JSON array of strings. Otherwise the
        first three non-blank lines of its answer are used, and when the
        router fails entirely a single canned reply is returned.
        """
        audience = "a business admin" if user_role == "admin" else "a client"
        prompt = (
            f"You're helping {audience} respond to this message:\n\n"
            f'"{message_text}"\n\n'
            "Suggest 3 professional reply options:\n"
            "1. Positive/Agreeable\n"
            "2. Neutral/Clarifying\n"
            "3. Detailed/Thorough\n\n"
            "Keep each reply under 100 words. Return as a JSON array of strings."
        )
        try:
            text = await self._text(prompt, provider="openai", model=_WRITING_MODEL)
        except AIRouterError as exc:
            logger.error("Reply suggestion failed: %s", exc)
            return FallbackRaw(raw="", value=[DEFAULT_REPLY_SUGGESTION])
        return extract_strings(
            text,
            lambda raw: first_lines(raw, MAX_REPLY_SUGGESTIONS, DEFAULT_REPLY_SUGGESTION),
        )

    async def generate_email_campaign(
        self,
        campaign_goal: str,
        target_audience: str,
        call_to_action: str,
        tone: str = "professional",
    ) -> StructuredResult[EmailCampaign]:
        prompt = (
            "Create an email campaign:\n\n"
            f"Goal: {campaign_goal}\n"
            f"Audience: {target_audience}\n"
            f"Tone: {tone}\n"
            f"CTA: {call_to_action}\n\n"
            "Generate:\n"
            "1. Subject Line (compelling, under 60 chars)\n"
            "2. Preview Text (engaging, under 90 chars)\n"
            "3. Email Body (HTML formatted, professional)\n"
            "4. 2 alternative variations (different angles)\n\n"
            "Return as JSON with keys: subject, preview, body, variations (array of {subject, body})"
        )
        text = await self._text(
            prompt,
            system_prompt="You are an email marketing copywriter.",
            provider="openai",
            model=_WRITING_MODEL,
        )
        return extract_structured(text, EmailCampaign, lambda raw: EmailCampaign(body=raw))

    async def generate_marketing_strategy(
        self,
        goals: list[str],
        business_type: str | None = None,
    ) -> StructuredResult[MarketingStrategy]:
        prompt = (
            f"You are a marketing strategist for {business_type or 'a business'}.\n\n"
            "Business Context:\n"
            f"- Goals: {', '.join(goals)}\n"
            "- Current focus: Growing customer base\n\n"
            "Generate a comprehensive marketing strategy including:\n"
            "1. Overall strategy\n"
            "2. Specific tactics (5-7)\n"
            "3. Timeline (3-6 months)\n"
            "4. Recommended budget\n"
            "5. Key metrics to track\n\n"
            "Return as JSON with keys: strategy, tactics (array), timeline, budget, metrics (array)"
        )
        text = await self._text(
            prompt,
            provider="anthropic",
            model=_ANALYSIS_MODEL,
        )
        return extract_structured(text, MarketingStrategy, lambda raw: MarketingStrategy(strategy=raw))

    async def chat(
        self,
        message: str,
        context: str | None = None,
        history: Iterable[ChatMessage | dict[str, Any]] = (),
        image: str | None = None,
    ) -> str:
        """Business assistant chat. Provider chosen by the selector."""
        prompt = f"Context: {context}\n\nUser: {message}" if context else message
        response = await self._router.chat(
            history,
            prompt,
            image=image,
            system_prompt="You are a helpful business assistant. Provide clear, actionable advice.",
        )
        return response.content

    async def outreach_message(self, business_name: str, industry: str, location: str) -> str:
        """Draft a short cold email to a generated lead."""
        prompt = (
            f'Write a short, professional cold email to "{business_name}" '
            f"(Industry: {industry}, Location: {location}).\n\n"
            "Goal: Offer to automate their workflow or improve their digital presence.\n"
            "Tone: Premium, concise, helpful.\n\n"
            "Format:\nSubject: [Subject Here]\n\n[Body Here]"
        )
        return await self._text(prompt, max_tokens=500)

    async def reply_or_unavailable(
        self,
        message: str,
        history: Iterable[ChatMessage | dict[str, Any]] = (),
        context: str | None = None,
        image: str | None = None,
    ) -> str:
        """
        chat() for UI callers: never raises a router or validation error.

        Failures are logged with full detail and replaced by a generic
        message suitable for end users. Invalid input (an empty message,
        malformed history) gets the generic message without routing.
        """
        try:
            return await self.chat(message, context=context, history=history, image=image)
        except ValidationError as exc:
            logger.warning("Invalid assistant request: %d validation error(s)", exc.error_count())
            return UNAVAILABLE_MESSAGE
        except AIRouterError as exc:
            logger.error("Assistant request failed: %s", exc)
            return BUSY_MESSAGE if is_capacity_error(exc) else UNAVAILABLE_MESSAGE
