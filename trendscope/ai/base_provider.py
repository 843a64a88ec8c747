"""TrendScope — Trend Reasoner Interface.

The reasoner turns raw signals into trend candidates, candidates into brand
suggestions, and a handful of stored trends into a narrative summary.
Orchestrators only ever see ``TrendReasoner``; tests use a deterministic
stub, production uses one of the LLM providers.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from pydantic import BaseModel, ValidationError

from trendscope.ai.prompts import (
    FALLBACK_SUMMARY,
    SUGGESTION_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    SUMMARY_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    TREND_PROMPT,
    TREND_SYSTEM_PROMPT,
)
from trendscope.config import settings
from trendscope.core.errors import ReasonerError
from trendscope.core.logging import get_logger
from trendscope.models.signal_models import RawSignal
from trendscope.models.trend_models import AISuggestion, BrandSuggestion, Trend, TrendCandidate

logger = get_logger("ai")


class TrendReasoner(ABC):
    """Capability interface for the reasoning step."""

    name: str = "reasoner"

    @abstractmethod
    async def extract_trends(self, signals: Sequence[RawSignal]) -> List[TrendCandidate]:
        """Propose trend candidates from aggregated raw signals."""
        ...

    @abstractmethod
    async def generate_suggestions(
        self, trends: Sequence[TrendCandidate]
    ) -> List[BrandSuggestion]:
        """Propose brand opportunities for a batch of accepted trends."""
        ...

    @abstractmethod
    async def summarize(
        self, trends: Sequence[Trend], suggestions: Sequence[AISuggestion]
    ) -> str:
        """Write the narrative paragraph(s) for the email digest."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this reasoner is configured and ready."""
        ...


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    clean = raw.strip()
    if clean.startswith("```"):
        clean = clean.split("\n", 1)[1] if "\n" in clean else clean[3:]
        if clean.endswith("```"):
            clean = clean[:-3]
    return clean.strip()


def parse_items(raw: str, key: str) -> List[Any]:
    """Extract the list under ``key`` from a JSON reply.

    Accepts ``{"<key>": [...]}``, a bare list, or a single object.
    """
    try:
        parsed = json.loads(strip_code_fences(raw) or "{}")
    except json.JSONDecodeError as e:
        raise ReasonerError(f"Unparseable {key} response: {e}") from e

    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        items = parsed.get(key)
        if isinstance(items, list):
            return items
        if items is None and "title" in parsed:
            return [parsed]
        if items is None:
            return []
    raise ReasonerError(f"Unexpected {key} response shape: {type(parsed).__name__}")


def _coerce(items: List[Any], model: type[BaseModel], label: str) -> list:
    valid = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {label}: {e.errors()[:1]}")
    return valid


def _dump(items: Sequence[BaseModel]) -> str:
    return json.dumps([i.model_dump(mode="json") for i in items])


class LLMReasoner(TrendReasoner):
    """Reasoner backed by a chat-completion model.

    Subclasses supply ``_complete``; prompting and parsing live here.
    """

    async def extract_trends(self, signals: Sequence[RawSignal]) -> List[TrendCandidate]:
        prompt = TREND_PROMPT.format(
            data=_dump(signals), threshold=settings.trend_confidence_threshold
        )
        raw = await self._call(TREND_SYSTEM_PROMPT, prompt, 0.7, 4000, "trend analysis")
        return _coerce(parse_items(raw, "trends"), TrendCandidate, "trend")

    async def generate_suggestions(
        self, trends: Sequence[TrendCandidate]
    ) -> List[BrandSuggestion]:
        prompt = SUGGESTION_PROMPT.format(data=_dump(trends))
        raw = await self._call(SUGGESTION_SYSTEM_PROMPT, prompt, 0.8, 4000, "brand suggestions")
        return _coerce(parse_items(raw, "suggestions"), BrandSuggestion, "suggestion")

    async def summarize(
        self, trends: Sequence[Trend], suggestions: Sequence[AISuggestion]
    ) -> str:
        prompt = SUMMARY_PROMPT.format(
            trends=_dump(trends[:3]), suggestions=_dump(suggestions[:3])
        )
        text = await self._call(
            SUMMARY_SYSTEM_PROMPT, prompt, 0.7, 1000, "email summary", json_output=False
        )
        return text.strip() or FALLBACK_SUMMARY

    async def _call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        purpose: str,
        json_output: bool = True,
    ) -> str:
        if not self.is_available():
            raise ReasonerError(f"{self.name} provider not configured")
        try:
            return await self._complete(
                system_prompt, user_prompt, temperature, max_tokens, json_output
            )
        except ReasonerError:
            raise
        except Exception as e:
            logger.error(f"{self.name} {purpose} failed: {e}")
            raise ReasonerError(f"Failed to generate {purpose} with AI: {e}") from e

    @abstractmethod
    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        json_output: bool,
    ) -> str:
        """Send one chat request and return the reply text."""
        ...
