"""TrendScope — Analysis Pipeline Orchestrator.

Runs one collection cycle:
  collect → extract trends → suggest → link sources → persist trends → persist suggestions

Both reasoner calls finish before anything is written, so a failed cycle
leaves no trends or suggestions behind.

The ``system`` source tracks the cycle's health: ``running`` while it is in
flight, ``active`` on success, ``error`` with the failure message otherwise.
"""

import time
from typing import List, Optional, Set

from pydantic import BaseModel

from trendscope.ai.base_provider import TrendReasoner
from trendscope.collectors.aggregator import Aggregator
from trendscope.config import settings
from trendscope.core.errors import ScrapingFailedError, with_deadline
from trendscope.core.logging import get_logger
from trendscope.models.signal_models import RawSignal
from trendscope.models.source_models import SYSTEM_PLATFORM, SourceStatus
from trendscope.models.trend_models import AISuggestion, Trend, TrendCandidate
from trendscope.storage.base import StorageGateway

logger = get_logger("analyzer.pipeline")

MAX_LINKED_SOURCES = 5


class AnalysisRunSummary(BaseModel):
    """Counts from one completed analysis cycle."""

    signals_collected: int
    sources_succeeded: int
    sources_attempted: int
    trends_proposed: int
    trends_created: int
    suggestions_created: int
    errors: List[str] = []
    duration_ms: int = 0


def link_sources(title: str, items: List[RawSignal]) -> List[dict]:
    """Signals whose content mentions the first word of ``title``.

    Keeps collection order and stops after MAX_LINKED_SOURCES.
    """
    words = title.lower().split()
    if not words:
        return []
    keyword = words[0]
    linked = [s for s in items if keyword in s.content.lower()]
    return [s.model_dump() for s in linked[:MAX_LINKED_SOURCES]]


class AnalysisPipeline:
    """Collect raw signals, reason over them, persist trends and suggestions."""

    def __init__(
        self,
        storage: StorageGateway,
        aggregator: Aggregator,
        reasoner: TrendReasoner,
        confidence_threshold: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.storage = storage
        self.aggregator = aggregator
        self.reasoner = reasoner
        self.confidence_threshold = (
            settings.trend_confidence_threshold
            if confidence_threshold is None
            else confidence_threshold
        )
        self.timeout = settings.external_call_timeout_seconds if timeout is None else timeout

    async def _enabled_platforms(self) -> Set[str]:
        """Adapter platforms whose Source is enabled (or has no record)."""
        enabled = set()
        for platform in self.aggregator.platforms:
            source = await self.storage.get_source_by_platform(platform)
            if source is None or source.enabled:
                enabled.add(platform)
        return enabled

    async def run_cycle(self) -> AnalysisRunSummary:
        """Run one full analysis cycle.

        Raises whatever aborted the cycle after recording it on the
        ``system`` source.
        """
        started = time.monotonic()
        logger.info("🔍 Starting trend analysis cycle", extra={"stage": "collecting"})
        await self.storage.update_source_status(
            SYSTEM_PLATFORM, SourceStatus.RUNNING, "Analyzing trends..."
        )

        try:
            # ── 1. Collect ──
            platforms = await self._enabled_platforms()
            result = await self.aggregator.collect_all(platforms)
            if not result.success or not result.items:
                raise ScrapingFailedError(result.errors)
            logger.info(f"Collected {len(result.items)} data points")

            # ── 2. Extract trends ──
            candidates = await with_deadline(
                self.reasoner.extract_trends(result.items),
                self.timeout,
                "trend extraction",
            )
            accepted = [c for c in candidates if c.confidence > self.confidence_threshold]
            logger.info(
                f"Reasoner proposed {len(candidates)} trends, {len(accepted)} above "
                f"confidence {self.confidence_threshold}",
                extra={"stage": "reasoning"},
            )

            # ── 3. Suggestions ──
            suggestions = await with_deadline(
                self.reasoner.generate_suggestions(accepted),
                self.timeout,
                "suggestion generation",
            )

            # ── 4. Persist trends, then suggestions ──
            created = await self._store_trends(accepted, result.items)
            trend_id = created[0].id if created else None
            stored_suggestions = 0
            for suggestion in suggestions:
                await self.storage.create_suggestion(
                    AISuggestion(
                        trend_id=trend_id,
                        title=suggestion.title,
                        description=suggestion.description,
                        impact=suggestion.impact,
                        effort=suggestion.effort,
                        type=suggestion.type,
                    )
                )
                stored_suggestions += 1

            # ── 5. Source health ──
            for platform in self.aggregator.platforms:
                await self.storage.update_source_status(platform, SourceStatus.ACTIVE)
            await self.storage.update_source_status(SYSTEM_PLATFORM, SourceStatus.ACTIVE)

        except Exception as e:
            logger.error(f"Error in trend analysis: {e}", extra={"stage": "error"})
            await self.storage.update_source_status(
                SYSTEM_PLATFORM, SourceStatus.ERROR, str(e)
            )
            raise

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"✅ Trend analysis completed: {len(created)} trends, "
            f"{stored_suggestions} suggestions",
            extra={"duration_ms": duration_ms},
        )
        return AnalysisRunSummary(
            signals_collected=len(result.items),
            sources_succeeded=result.succeeded_count,
            sources_attempted=result.attempted_count,
            trends_proposed=len(candidates),
            trends_created=len(created),
            suggestions_created=stored_suggestions,
            errors=result.errors,
            duration_ms=duration_ms,
        )

    async def _store_trends(
        self, accepted: List[TrendCandidate], items: List[RawSignal]
    ) -> List[Trend]:
        created = []
        for candidate in accepted:
            trend = await self.storage.create_trend(
                Trend(
                    title=candidate.title,
                    description=candidate.description,
                    category=candidate.category,
                    sources=link_sources(candidate.title, items),
                    confidence=candidate.confidence,
                    trend_score=candidate.trend_score,
                    change_percentage=candidate.change_percentage,
                    impact=candidate.impact,
                )
            )
            logger.debug(f"Stored trend {trend.title!r}", extra={"entity_id": trend.id})
            created.append(trend)
        return created
