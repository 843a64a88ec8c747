"""TrendScope — Abstract Persistence Gateway.

Orchestrators and routes depend only on this contract, so the in-process
store and the SQL store are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from pydantic import BaseModel

from trendscope.models.report_models import Report
from trendscope.models.source_models import SYSTEM_PLATFORM, Setting, Source, SourceStatus
from trendscope.models.trend_models import AISuggestion, Trend


class Analytics(BaseModel):
    """Dashboard counters."""

    total_trends: int
    total_suggestions: int
    total_reports: int
    active_sources_count: int
    last_report_date: Optional[str] = None


class StorageGateway(ABC):
    """CRUD over trends, suggestions, reports, sources and settings.

    All list operations return newest first. Implementations must tolerate
    interleaved calls from the collection and report cycles.
    """

    # ── Trends ──

    @abstractmethod
    async def get_trend(self, trend_id: int) -> Optional[Trend]: ...

    @abstractmethod
    async def get_all_trends(self) -> List[Trend]: ...

    @abstractmethod
    async def get_recent_trends(self, hours: float) -> List[Trend]:
        """Trends created within the trailing ``hours`` window."""
        ...

    @abstractmethod
    async def create_trend(self, trend: Trend) -> Trend:
        """Assign id and creation time, store, and return the trend."""
        ...

    # ── AI Suggestions ──

    @abstractmethod
    async def get_suggestion(self, suggestion_id: int) -> Optional[AISuggestion]: ...

    @abstractmethod
    async def get_all_suggestions(self) -> List[AISuggestion]: ...

    @abstractmethod
    async def get_recent_suggestions(self, hours: float) -> List[AISuggestion]: ...

    @abstractmethod
    async def get_suggestions_by_trend(self, trend_id: int) -> List[AISuggestion]: ...

    @abstractmethod
    async def create_suggestion(self, suggestion: AISuggestion) -> AISuggestion: ...

    # ── Reports ──

    @abstractmethod
    async def get_report(self, report_id: int) -> Optional[Report]: ...

    @abstractmethod
    async def get_all_reports(self) -> List[Report]: ...

    @abstractmethod
    async def get_report_by_date(self, date: str) -> Optional[Report]: ...

    @abstractmethod
    async def create_report(self, report: Report) -> Report: ...

    # ── Sources ──

    @abstractmethod
    async def get_source(self, source_id: int) -> Optional[Source]: ...

    @abstractmethod
    async def get_all_sources(self) -> List[Source]: ...

    @abstractmethod
    async def get_source_by_platform(self, platform: str) -> Optional[Source]: ...

    @abstractmethod
    async def create_source(self, source: Source) -> Source: ...

    @abstractmethod
    async def update_source_status(
        self,
        platform: str,
        status: SourceStatus,
        error_message: Optional[str] = None,
    ) -> None:
        """Set status, stamp ``last_check``, replace ``error_message``.

        Unknown platforms are ignored.
        """
        ...

    # ── Settings ──

    @abstractmethod
    async def get_setting(self, key: str) -> Optional[Setting]: ...

    @abstractmethod
    async def get_all_settings(self) -> List[Setting]: ...

    @abstractmethod
    async def update_setting(self, key: str, value: Any) -> Setting:
        """Upsert a setting by key."""
        ...

    async def get_setting_value(self, key: str, default: Any = None) -> Any:
        """Return the setting's value, or ``default`` when unset or null."""
        setting = await self.get_setting(key)
        if setting is None or setting.value is None:
            return default
        return setting.value

    # ── Analytics ──

    async def get_analytics(self) -> Analytics:
        reports = await self.get_all_reports()
        sources = await self.get_all_sources()
        return Analytics(
            total_trends=len(await self.get_all_trends()),
            total_suggestions=len(await self.get_all_suggestions()),
            total_reports=len(reports),
            active_sources_count=sum(
                1
                for s in sources
                if s.enabled
                and s.status == SourceStatus.ACTIVE
                and s.platform != SYSTEM_PLATFORM
            ),
            last_report_date=reports[0].date if reports else None,
        )

    # ── Bootstrap ──

    async def seed_defaults(self) -> None:
        """Create the default sources and settings that do not exist yet."""
        from trendscope.storage.defaults import DEFAULT_SETTINGS, DEFAULT_SOURCES

        for name, platform in DEFAULT_SOURCES:
            if await self.get_source_by_platform(platform) is None:
                await self.create_source(Source(name=name, platform=platform))
        for key, value in DEFAULT_SETTINGS.items():
            if await self.get_setting(key) is None:
                await self.update_setting(key, value)
