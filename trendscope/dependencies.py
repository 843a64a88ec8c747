"""TrendScope — Service Wiring.

Process-wide singletons for the storage, reasoner, collectors, dispatcher,
orchestrators and scheduler. Routes receive them through ``Depends`` so
tests can swap any of them via ``app.dependency_overrides``.
"""

from functools import lru_cache

from trendscope.ai.base_provider import TrendReasoner
from trendscope.ai.factory import PROVIDERS, select_provider
from trendscope.analyzer.pipeline import AnalysisPipeline
from trendscope.analyzer.report_pipeline import ReportPipeline
from trendscope.collectors.aggregator import Aggregator, default_adapters
from trendscope.config import settings
from trendscope.core.errors import ReasonerUnavailableError
from trendscope.core.logging import get_logger
from trendscope.notifications.email_dispatcher import EmailDispatcher
from trendscope.scheduler.jobs import TrendScheduler
from trendscope.storage.base import StorageGateway
from trendscope.storage.memory import MemoryStorage

logger = get_logger("dependencies")


@lru_cache
def get_storage() -> StorageGateway:
    """Storage backend chosen by STORAGE_BACKEND (memory | sql)."""
    if settings.storage_backend == "sql":
        from trendscope.database import get_engine, init_db, test_connection
        from trendscope.storage.sql import SQLStorage

        engine = get_engine()
        if test_connection(engine):
            init_db(engine)
        else:
            logger.error("❌ Database NOT connected — storage calls will fail")
        return SQLStorage(engine)
    logger.info("📦 Storage backend: in-memory")
    return MemoryStorage()


@lru_cache
def get_reasoner() -> TrendReasoner:
    """First available AI provider, or the configured default when none is.

    An unconfigured provider raises ReasonerError on every call, so cycles
    fail visibly instead of silently producing nothing.
    """
    try:
        name, provider = select_provider("auto")
        logger.info(f"🤖 AI provider: {name}")
        return provider
    except ReasonerUnavailableError as e:
        logger.warning(f"{e} Analysis and reports will fail until one is set.")
        cls = PROVIDERS.get(settings.default_ai_provider, PROVIDERS["openai"])
        return cls()


@lru_cache
def get_aggregator() -> Aggregator:
    return Aggregator(default_adapters())


@lru_cache
def get_dispatcher() -> EmailDispatcher:
    return EmailDispatcher()


@lru_cache
def get_analysis_pipeline() -> AnalysisPipeline:
    return AnalysisPipeline(get_storage(), get_aggregator(), get_reasoner())


@lru_cache
def get_report_pipeline() -> ReportPipeline:
    return ReportPipeline(get_storage(), get_reasoner(), get_dispatcher())


@lru_cache
def get_scheduler() -> TrendScheduler:
    return TrendScheduler(get_storage(), get_analysis_pipeline(), get_report_pipeline())
