"""
Test fixtures and sample data for TrendScope tests.
"""

from typing import List, Optional, Sequence

from trendscope.ai.base_provider import TrendReasoner
from trendscope.collectors.base import CollectorAdapter
from trendscope.core.errors import CollectorError, EmailDispatchError, ReasonerError
from trendscope.models.report_models import EmailRecipient, EmailTemplate
from trendscope.models.signal_models import RawSignal
from trendscope.models.trend_models import (
    AISuggestion,
    BrandSuggestion,
    Trend,
    TrendCandidate,
)


def make_signal(
    platform: str = "reddit",
    content: str = "Thrift haul: vintage denim is everywhere this month",
    mentions: int = 120,
    engagement: Optional[int] = None,
    metadata: Optional[dict] = None,
) -> RawSignal:
    """Create a sample RawSignal for testing."""
    return RawSignal(
        platform=platform,
        content=content,
        mentions=mentions,
        engagement=engagement,
        metadata=metadata,
    )


def make_signals(platform: str, count: int = 3) -> List[RawSignal]:
    """Create ``count`` valid signals for one platform."""
    return [
        make_signal(
            platform=platform,
            content=f"{platform} post #{i} about sustainable fashion picks",
            mentions=100 + i,
        )
        for i in range(count)
    ]


def make_candidate(
    title: str = "Quiet Luxury",
    confidence: int = 85,
    trend_score: int = 80,
    change_percentage: int = 40,
    impact: str = "high",
    category: str = "fashion",
) -> TrendCandidate:
    return TrendCandidate(
        title=title,
        description=f"{title} is gaining traction with Gen Z shoppers.",
        category=category,
        confidence=confidence,
        trend_score=trend_score,
        change_percentage=change_percentage,
        impact=impact,
    )


def make_brand_suggestion(
    title: str = "Launch a capsule collection",
    impact: str = "high",
    effort: str = "medium",
    type: str = "strategic",
) -> BrandSuggestion:
    return BrandSuggestion(
        title=title,
        description="Ship a limited drop built around the trend.",
        impact=impact,
        effort=effort,
        type=type,
    )


def make_trend(title: str = "Quiet Luxury", trend_score: int = 80, **kwargs) -> Trend:
    return Trend(
        title=title,
        description=kwargs.pop("description", f"{title} is gaining traction."),
        category=kwargs.pop("category", "fashion"),
        sources=kwargs.pop("sources", [{"platform": "reddit", "mentions": 120}]),
        confidence=kwargs.pop("confidence", 85),
        trend_score=trend_score,
        **kwargs,
    )


def make_suggestion(title: str = "Launch a capsule collection", **kwargs) -> AISuggestion:
    return AISuggestion(
        title=title,
        description=kwargs.pop("description", "Ship a limited drop."),
        **kwargs,
    )


# =============================================================================
# Test doubles
# =============================================================================


class StubAdapter(CollectorAdapter):
    """Adapter returning canned signals, or raising when ``error`` is set."""

    def __init__(
        self,
        platform: str,
        name: Optional[str] = None,
        signals: Optional[List[RawSignal]] = None,
        error: Optional[str] = None,
        aliases: tuple = (),
    ):
        self.platform = platform
        self.name = name or platform.title()
        self.aliases = aliases
        self.signals = signals if signals is not None else make_signals(platform)
        self.error = error
        self.calls = 0

    async def collect(self) -> List[RawSignal]:
        self.calls += 1
        if self.error:
            raise CollectorError(self.error, self.platform)
        return list(self.signals)


class StubReasoner(TrendReasoner):
    """Deterministic reasoner with call recording."""

    name = "stub"

    def __init__(
        self,
        candidates: Optional[List[TrendCandidate]] = None,
        suggestions: Optional[List[BrandSuggestion]] = None,
        summary: str = "Quiet luxury and thrift culture lead today's shifts.",
        fail_on: Optional[str] = None,
    ):
        self.candidates = candidates if candidates is not None else [make_candidate()]
        self.suggestions = suggestions if suggestions is not None else [make_brand_suggestion()]
        self.summary = summary
        self.fail_on = fail_on
        self.extract_calls: List[Sequence[RawSignal]] = []
        self.suggest_calls: List[Sequence[TrendCandidate]] = []
        self.summary_calls = 0

    def _maybe_fail(self, stage: str) -> None:
        if self.fail_on == stage:
            raise ReasonerError(f"{stage} failed")

    async def extract_trends(self, signals):
        self.extract_calls.append(list(signals))
        self._maybe_fail("extract")
        return list(self.candidates)

    async def generate_suggestions(self, trends):
        self.suggest_calls.append(list(trends))
        self._maybe_fail("suggest")
        return list(self.suggestions)

    async def summarize(self, trends, suggestions):
        self.summary_calls += 1
        self._maybe_fail("summarize")
        return self.summary

    def is_available(self) -> bool:
        return True


class StubDispatcher:
    """Email dispatcher that records sends instead of talking SMTP."""

    def __init__(self, fail_for: Optional[str] = None):
        self.fail_for = fail_for
        self.sent: List[tuple[List[EmailRecipient], EmailTemplate]] = []

    def is_configured(self) -> bool:
        return True

    async def send(self, recipients, template) -> int:
        recipients = list(recipients)
        for r in recipients:
            if r.email == self.fail_for:
                raise EmailDispatchError(f"Failed to send email to {r.email}", r.email)
        self.sent.append((recipients, template))
        return len(recipients)
