"""TrendScope — Scheduler Jobs.

Two APScheduler cron jobs: trend collection on ``scraping_interval`` and the
daily report on ``daily_report_time``. Each job has a RunGuard so a cycle
never overlaps itself, whether it was fired by the timer or by hand.
"""

import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from pydantic import BaseModel, Field

from trendscope.analyzer.pipeline import AnalysisPipeline
from trendscope.analyzer.report_pipeline import ReportPipeline
from trendscope.config import settings
from trendscope.core.logging import get_logger
from trendscope.storage.base import StorageGateway

logger = get_logger("scheduler")

COLLECTION_JOB_ID = "trend_collection"
REPORT_JOB_ID = "daily_report"


class RunGuard:
    """Single-flight flag for one job.

    ``acquire`` checks and sets without awaiting, so it is atomic on the
    event loop.
    """

    def __init__(self, name: str):
        self.name = name
        self.running = False

    def acquire(self) -> bool:
        if self.running:
            return False
        self.running = True
        return True

    def release(self) -> None:
        self.running = False


class JobRunResult(BaseModel):
    job: str
    status: str  # completed | skipped | failed
    error: Optional[str] = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: int = 0


class SchedulerStatus(BaseModel):
    enabled: bool
    next_collection: Optional[str] = None
    next_report: Optional[str] = None
    collection_running: bool = False
    report_running: bool = False


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def build_trigger(expression: str, default: str, label: str) -> CronTrigger:
    """Parse a 5-field cron expression, falling back to ``default``."""
    try:
        return CronTrigger.from_crontab(expression, timezone=timezone.utc)
    except (ValueError, TypeError) as e:
        logger.error(f"Invalid {label} cron expression {expression!r}: {e}; using {default!r}")
        return CronTrigger.from_crontab(default, timezone=timezone.utc)


class TrendScheduler:
    """Owns the cron jobs and the run guards for collection and reporting."""

    def __init__(
        self,
        storage: StorageGateway,
        analysis: AnalysisPipeline,
        report: ReportPipeline,
    ):
        self.storage = storage
        self.analysis = analysis
        self.report = report
        self.collection_guard = RunGuard("collection")
        self.report_guard = RunGuard("report")
        self.scheduler: Optional[AsyncIOScheduler] = None

    # ── Lifecycle ──

    async def _read_config(self) -> tuple[str, str, bool]:
        try:
            interval = await self.storage.get_setting_value(
                "scraping_interval", settings.default_scraping_interval
            )
            report_time = await self.storage.get_setting_value(
                "daily_report_time", settings.default_daily_report_time
            )
            enabled = await self.storage.get_setting_value("scheduler_enabled", True)
        except Exception as e:
            logger.error(f"Could not read scheduler settings, using defaults: {e}")
            return settings.default_scraping_interval, settings.default_daily_report_time, True
        return str(interval), str(report_time), _as_bool(enabled)

    async def start(self) -> None:
        """Register both cron jobs from the stored cadences.

        Cadences are read once; changing them takes a restart.
        """
        interval, report_time, enabled = await self._read_config()
        if not enabled:
            logger.info("Scheduler disabled via settings")
            return

        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.scheduler.add_job(
            self.run_collection_job,
            build_trigger(interval, settings.default_scraping_interval, "scraping_interval"),
            id=COLLECTION_JOB_ID,
            replace_existing=True,
            misfire_grace_time=3600,
        )
        self.scheduler.add_job(
            self.run_report_job,
            build_trigger(report_time, settings.default_daily_report_time, "daily_report_time"),
            id=REPORT_JOB_ID,
            replace_existing=True,
            misfire_grace_time=3600,
        )
        self.scheduler.start()
        logger.info(
            f"Scheduler started. Collection: {interval!r}, daily report: {report_time!r} (UTC)"
        )

    def stop(self) -> None:
        """Remove both jobs and shut down without waiting for running cycles."""
        if self.scheduler is None:
            return
        for job_id in (COLLECTION_JOB_ID, REPORT_JOB_ID):
            if self.scheduler.get_job(job_id):
                self.scheduler.remove_job(job_id)
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None
        logger.info("Scheduler stopped")

    # ── Status ──

    def _next_run(self, job_id: str) -> Optional[str]:
        if self.scheduler is None:
            return None
        job = self.scheduler.get_job(job_id)
        next_run = getattr(job, "next_run_time", None) if job else None
        return next_run.isoformat() if next_run else None

    async def status(self) -> SchedulerStatus:
        try:
            enabled = _as_bool(await self.storage.get_setting_value("scheduler_enabled", True))
        except Exception as e:
            logger.error(f"Could not read scheduler_enabled: {e}")
            enabled = self.scheduler is not None
        return SchedulerStatus(
            enabled=enabled,
            next_collection=self._next_run(COLLECTION_JOB_ID),
            next_report=self._next_run(REPORT_JOB_ID),
            collection_running=self.collection_guard.running,
            report_running=self.report_guard.running,
        )

    # ── Guarded runs ──

    async def _run_guarded(
        self, guard: RunGuard, work: Callable[[], Awaitable[Any]]
    ) -> JobRunResult:
        if not guard.acquire():
            logger.info(f"{guard.name} job already running, skipping", extra={"job": guard.name})
            return JobRunResult(job=guard.name, status="skipped")

        started = time.monotonic()
        result = JobRunResult(job=guard.name, status="completed")
        try:
            logger.info(f"Running scheduled {guard.name} job", extra={"job": guard.name})
            await work()
        except Exception as e:
            logger.error(f"{guard.name} job failed: {e}", extra={"job": guard.name})
            result.status = "failed"
            result.error = str(e)
        finally:
            guard.release()
        result.duration_ms = int((time.monotonic() - started) * 1000)
        return result

    async def run_collection_job(self) -> JobRunResult:
        return await self._run_guarded(self.collection_guard, self.analysis.run_cycle)

    async def run_report_job(self) -> JobRunResult:
        return await self._run_guarded(self.report_guard, self.report.run_report_cycle)

    async def trigger_collection(self) -> JobRunResult:
        """Run a collection cycle now, unless one is already in flight."""
        return await self.run_collection_job()

    async def trigger_report(self) -> JobRunResult:
        """Run a report cycle now, unless one is already in flight."""
        return await self.run_report_job()
