"""
Unit tests for trendscope/scheduler/jobs.py

Tests run guards, manual triggers, cron registration and status.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from trendscope.scheduler.jobs import (
    COLLECTION_JOB_ID,
    REPORT_JOB_ID,
    RunGuard,
    TrendScheduler,
    build_trigger,
)


def make_scheduler(storage, run_cycle=None, run_report_cycle=None) -> TrendScheduler:
    analysis = MagicMock()
    analysis.run_cycle = run_cycle or AsyncMock()
    report = MagicMock()
    report.run_report_cycle = run_report_cycle or AsyncMock(return_value=None)
    return TrendScheduler(storage, analysis, report)


class TestRunGuard:
    def test_acquire_and_release(self):
        guard = RunGuard("collection")
        assert guard.acquire() is True
        assert guard.acquire() is False
        guard.release()
        assert guard.acquire() is True


class TestBuildTrigger:
    def test_valid_expression(self):
        trigger = build_trigger("*/15 * * * *", "0 */2 * * *", "scraping_interval")
        assert "*/15" in str(trigger)

    def test_invalid_expression_falls_back(self):
        trigger = build_trigger("every two hours", "0 */2 * * *", "scraping_interval")
        assert "*/2" in str(trigger)


class TestGuardedRuns:
    """Overlapping runs of the same job are skipped."""

    @pytest.mark.asyncio
    async def test_overlapping_collection_is_skipped(self, storage):
        release = asyncio.Event()
        calls = 0

        async def slow_cycle():
            nonlocal calls
            calls += 1
            await release.wait()

        scheduler = make_scheduler(storage, run_cycle=slow_cycle)
        first = asyncio.create_task(scheduler.trigger_collection())
        await asyncio.sleep(0)

        second = await scheduler.run_collection_job()
        assert second.status == "skipped"
        assert second.error is None
        assert (await scheduler.status()).collection_running is True

        release.set()
        assert (await first).status == "completed"
        assert calls == 1
        assert scheduler.collection_guard.running is False

    @pytest.mark.asyncio
    async def test_collection_and_report_may_interleave(self, storage):
        release = asyncio.Event()

        async def slow_cycle():
            await release.wait()

        scheduler = make_scheduler(storage, run_cycle=slow_cycle)
        collection = asyncio.create_task(scheduler.trigger_collection())
        await asyncio.sleep(0)

        report = await scheduler.trigger_report()
        assert report.status == "completed"

        release.set()
        await collection

    @pytest.mark.asyncio
    async def test_failure_releases_guard(self, storage):
        scheduler = make_scheduler(
            storage, run_cycle=AsyncMock(side_effect=RuntimeError("Scraping failed: "))
        )

        result = await scheduler.trigger_collection()
        assert result.status == "failed"
        assert result.error == "Scraping failed: "
        assert scheduler.collection_guard.running is False

        again = await scheduler.trigger_collection()
        assert again.status == "failed"

    @pytest.mark.asyncio
    async def test_report_job_runs_report_cycle(self, storage):
        run_report_cycle = AsyncMock(return_value=None)
        scheduler = make_scheduler(storage, run_report_cycle=run_report_cycle)

        result = await scheduler.run_report_job()
        assert result.status == "completed"
        run_report_cycle.assert_awaited_once()


class TestLifecycle:
    """Tests for start/stop/status."""

    @pytest.mark.asyncio
    async def test_start_registers_both_jobs(self, storage):
        await storage.seed_defaults()
        scheduler = make_scheduler(storage)
        await scheduler.start()
        try:
            assert scheduler.scheduler.get_job(COLLECTION_JOB_ID) is not None
            assert scheduler.scheduler.get_job(REPORT_JOB_ID) is not None
            status = await scheduler.status()
            assert status.enabled is True
            assert status.next_collection is not None
            assert status.next_report is not None
            assert status.collection_running is False
        finally:
            scheduler.stop()

        assert scheduler.scheduler is None
        status = await scheduler.status()
        assert status.next_collection is None

    @pytest.mark.asyncio
    async def test_disabled_scheduler_is_inert(self, storage):
        await storage.update_setting("scheduler_enabled", False)
        scheduler = make_scheduler(storage)
        await scheduler.start()

        assert scheduler.scheduler is None
        status = await scheduler.status()
        assert status.enabled is False
        assert status.next_collection is None
        assert status.next_report is None
        scheduler.stop()

    @pytest.mark.asyncio
    async def test_invalid_cadence_uses_default(self, storage):
        await storage.update_setting("scraping_interval", "not a cron")
        scheduler = make_scheduler(storage)
        await scheduler.start()
        try:
            job = scheduler.scheduler.get_job(COLLECTION_JOB_ID)
            assert "*/2" in str(job.trigger)
        finally:
            scheduler.stop()

    @pytest.mark.asyncio
    async def test_settings_read_error_uses_defaults(self, storage):
        storage.get_setting = AsyncMock(side_effect=RuntimeError("db down"))
        scheduler = make_scheduler(storage)
        await scheduler.start()
        try:
            assert scheduler.scheduler.get_job(REPORT_JOB_ID) is not None
        finally:
            scheduler.stop()

    def test_stop_without_start(self, storage):
        make_scheduler(storage).stop()
