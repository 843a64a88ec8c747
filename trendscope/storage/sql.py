"""TrendScope — SQLModel Storage.

Durable backend over any SQLAlchemy engine (SQLite locally, PostgreSQL in
production). Each call opens its own short-lived session.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from trendscope.models.report_models import Report
from trendscope.models.source_models import Setting, Source, SourceStatus
from trendscope.models.trend_models import AISuggestion, Trend
from trendscope.storage.base import StorageGateway


class SQLStorage(StorageGateway):
    """Storage backed by a relational database."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def _add(self, obj):
        with self._session() as session:
            session.add(obj)
            session.commit()
            session.refresh(obj)
            return obj

    def _get(self, model, obj_id: int):
        with self._session() as session:
            return session.get(model, obj_id)

    def _all(self, query) -> list:
        with self._session() as session:
            return list(session.exec(query).all())

    def _first(self, query):
        with self._session() as session:
            return session.exec(query).first()

    @staticmethod
    def _cutoff(hours: float) -> datetime:
        return datetime.now(timezone.utc) - timedelta(hours=hours)

    # ── Trends ──

    async def get_trend(self, trend_id: int) -> Optional[Trend]:
        return self._get(Trend, trend_id)

    async def get_all_trends(self) -> List[Trend]:
        return self._all(
            select(Trend).order_by(Trend.created_at.desc(), Trend.id.desc())  # type: ignore
        )

    async def get_recent_trends(self, hours: float) -> List[Trend]:
        return self._all(
            select(Trend)
            .where(Trend.created_at > self._cutoff(hours))
            .order_by(Trend.created_at.desc(), Trend.id.desc())  # type: ignore
        )

    async def create_trend(self, trend: Trend) -> Trend:
        trend.id = None
        trend.created_at = datetime.now(timezone.utc)
        return self._add(trend)

    # ── AI Suggestions ──

    async def get_suggestion(self, suggestion_id: int) -> Optional[AISuggestion]:
        return self._get(AISuggestion, suggestion_id)

    async def get_all_suggestions(self) -> List[AISuggestion]:
        return self._all(
            select(AISuggestion).order_by(
                AISuggestion.created_at.desc(), AISuggestion.id.desc()  # type: ignore
            )
        )

    async def get_recent_suggestions(self, hours: float) -> List[AISuggestion]:
        return self._all(
            select(AISuggestion)
            .where(AISuggestion.created_at > self._cutoff(hours))
            .order_by(AISuggestion.created_at.desc(), AISuggestion.id.desc())  # type: ignore
        )

    async def get_suggestions_by_trend(self, trend_id: int) -> List[AISuggestion]:
        return self._all(
            select(AISuggestion)
            .where(AISuggestion.trend_id == trend_id)
            .order_by(AISuggestion.created_at.desc(), AISuggestion.id.desc())  # type: ignore
        )

    async def create_suggestion(self, suggestion: AISuggestion) -> AISuggestion:
        suggestion.id = None
        suggestion.created_at = datetime.now(timezone.utc)
        return self._add(suggestion)

    # ── Reports ──

    async def get_report(self, report_id: int) -> Optional[Report]:
        return self._get(Report, report_id)

    async def get_all_reports(self) -> List[Report]:
        return self._all(
            select(Report).order_by(Report.created_at.desc(), Report.id.desc())  # type: ignore
        )

    async def get_report_by_date(self, date: str) -> Optional[Report]:
        return self._first(select(Report).where(Report.date == date))

    async def create_report(self, report: Report) -> Report:
        report.id = None
        report.created_at = datetime.now(timezone.utc)
        return self._add(report)

    # ── Sources ──

    async def get_source(self, source_id: int) -> Optional[Source]:
        return self._get(Source, source_id)

    async def get_all_sources(self) -> List[Source]:
        return self._all(select(Source).order_by(Source.id))  # type: ignore

    async def get_source_by_platform(self, platform: str) -> Optional[Source]:
        return self._first(select(Source).where(Source.platform == platform))

    async def create_source(self, source: Source) -> Source:
        if await self.get_source_by_platform(source.platform) is not None:
            raise ValueError(f"Source for platform '{source.platform}' already exists")
        source.id = None
        source.last_check = None
        return self._add(source)

    async def update_source_status(
        self,
        platform: str,
        status: SourceStatus,
        error_message: Optional[str] = None,
    ) -> None:
        with self._session() as session:
            source = session.exec(
                select(Source).where(Source.platform == platform)
            ).first()
            if source is None:
                return
            source.status = status
            source.last_check = datetime.now(timezone.utc)
            source.error_message = error_message or None
            session.add(source)
            session.commit()

    # ── Settings ──

    async def get_setting(self, key: str) -> Optional[Setting]:
        return self._first(select(Setting).where(Setting.key == key))

    async def get_all_settings(self) -> List[Setting]:
        return self._all(select(Setting).order_by(Setting.id))  # type: ignore

    async def update_setting(self, key: str, value: Any) -> Setting:
        with self._session() as session:
            setting = session.exec(select(Setting).where(Setting.key == key)).first()
            if setting is None:
                setting = Setting(key=key)
            setting.value = value
            setting.updated_at = datetime.now(timezone.utc)
            session.add(setting)
            session.commit()
            session.refresh(setting)
            return setting
