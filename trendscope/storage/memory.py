"""TrendScope — In-Process Storage.

Keyed dictionaries with per-entity auto-increment counters. Every method
completes without yielding to the event loop, so calls never interleave.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from trendscope.models.report_models import Report
from trendscope.models.source_models import Setting, Source, SourceStatus
from trendscope.models.trend_models import AISuggestion, Trend
from trendscope.storage.base import StorageGateway


def _clone(model, **updates):
    """Detached copy of ``model`` with ``updates`` applied."""
    return type(model)(**{**model.model_dump(), **updates})


def _newest_first(items):
    return sorted(items, key=lambda i: (i.created_at, i.id), reverse=True)


def _cutoff(hours: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(hours=hours)


class MemoryStorage(StorageGateway):
    """Reference storage backend kept entirely in memory."""

    def __init__(self) -> None:
        self._trends: Dict[int, Trend] = {}
        self._suggestions: Dict[int, AISuggestion] = {}
        self._reports: Dict[int, Report] = {}
        self._sources: Dict[int, Source] = {}
        self._settings: Dict[str, Setting] = {}
        self._counters: Dict[str, int] = {
            "trend": 0,
            "suggestion": 0,
            "report": 0,
            "source": 0,
            "setting": 0,
        }

    def _next_id(self, kind: str) -> int:
        self._counters[kind] += 1
        return self._counters[kind]

    # ── Trends ──

    async def get_trend(self, trend_id: int) -> Optional[Trend]:
        return self._trends.get(trend_id)

    async def get_all_trends(self) -> List[Trend]:
        return _newest_first(self._trends.values())

    async def get_recent_trends(self, hours: float) -> List[Trend]:
        cutoff = _cutoff(hours)
        return _newest_first(t for t in self._trends.values() if t.created_at > cutoff)

    async def create_trend(self, trend: Trend) -> Trend:
        stored = _clone(
            trend, id=self._next_id("trend"), created_at=datetime.now(timezone.utc)
        )
        self._trends[stored.id] = stored
        return stored

    # ── AI Suggestions ──

    async def get_suggestion(self, suggestion_id: int) -> Optional[AISuggestion]:
        return self._suggestions.get(suggestion_id)

    async def get_all_suggestions(self) -> List[AISuggestion]:
        return _newest_first(self._suggestions.values())

    async def get_recent_suggestions(self, hours: float) -> List[AISuggestion]:
        cutoff = _cutoff(hours)
        return _newest_first(
            s for s in self._suggestions.values() if s.created_at > cutoff
        )

    async def get_suggestions_by_trend(self, trend_id: int) -> List[AISuggestion]:
        return _newest_first(
            s for s in self._suggestions.values() if s.trend_id == trend_id
        )

    async def create_suggestion(self, suggestion: AISuggestion) -> AISuggestion:
        stored = _clone(
            suggestion,
            id=self._next_id("suggestion"),
            created_at=datetime.now(timezone.utc),
        )
        self._suggestions[stored.id] = stored
        return stored

    # ── Reports ──

    async def get_report(self, report_id: int) -> Optional[Report]:
        return self._reports.get(report_id)

    async def get_all_reports(self) -> List[Report]:
        return _newest_first(self._reports.values())

    async def get_report_by_date(self, date: str) -> Optional[Report]:
        return next((r for r in self._reports.values() if r.date == date), None)

    async def create_report(self, report: Report) -> Report:
        stored = _clone(
            report, id=self._next_id("report"), created_at=datetime.now(timezone.utc)
        )
        self._reports[stored.id] = stored
        return stored

    # ── Sources ──

    async def get_source(self, source_id: int) -> Optional[Source]:
        return self._sources.get(source_id)

    async def get_all_sources(self) -> List[Source]:
        return list(self._sources.values())

    async def get_source_by_platform(self, platform: str) -> Optional[Source]:
        return next((s for s in self._sources.values() if s.platform == platform), None)

    async def create_source(self, source: Source) -> Source:
        if await self.get_source_by_platform(source.platform) is not None:
            raise ValueError(f"Source for platform '{source.platform}' already exists")
        stored = _clone(source, id=self._next_id("source"), last_check=None)
        self._sources[stored.id] = stored
        return stored

    async def update_source_status(
        self,
        platform: str,
        status: SourceStatus,
        error_message: Optional[str] = None,
    ) -> None:
        source = await self.get_source_by_platform(platform)
        if source is None:
            return
        source.status = status
        source.last_check = datetime.now(timezone.utc)
        source.error_message = error_message or None

    # ── Settings ──

    async def get_setting(self, key: str) -> Optional[Setting]:
        return self._settings.get(key)

    async def get_all_settings(self) -> List[Setting]:
        return list(self._settings.values())

    async def update_setting(self, key: str, value: Any) -> Setting:
        setting = self._settings.get(key)
        if setting is None:
            setting = Setting(id=self._next_id("setting"), key=key)
            self._settings[key] = setting
        setting.value = value
        setting.updated_at = datetime.now(timezone.utc)
        return setting
