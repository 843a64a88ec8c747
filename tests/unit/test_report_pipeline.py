"""
Unit tests for trendscope/analyzer/report_pipeline.py

Tests the no-op paths (nothing to report, nobody to send to), the sent
report record, and the failed report record.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from trendscope.analyzer.report_pipeline import ReportPipeline, parse_recipients
from trendscope.core.errors import EmailDispatchError, ReasonerError
from trendscope.models.report_models import ReportStatus
from tests.fixtures import StubDispatcher, StubReasoner, make_suggestion, make_trend


async def seed_trends(storage, count: int = 5, suggestions: int = 2):
    for i in range(count):
        await storage.create_trend(make_trend(f"Trend {i}", trend_score=60 + i))
    for i in range(suggestions):
        await storage.create_suggestion(make_suggestion(f"Idea {i}"))


async def set_recipients(storage, recipients):
    await storage.update_setting("email_recipients", recipients)


class TestParseRecipients:
    """Tests for the email_recipients setting parser."""

    def test_objects_and_strings(self):
        recipients = parse_recipients(
            [{"email": "a@example.com", "name": "Ana"}, "b@example.com"]
        )
        assert [r.email for r in recipients] == ["a@example.com", "b@example.com"]
        assert recipients[0].name == "Ana"

    def test_skips_entries_without_email(self):
        recipients = parse_recipients([{"name": "No Address"}, {"email": ""}, 42])
        assert recipients == []

    def test_none(self):
        assert parse_recipients(None) == []


class TestRunReportCycle:
    """Tests for ReportPipeline.run_report_cycle."""

    @pytest.mark.asyncio
    async def test_no_trends_is_a_no_op(self, storage, reasoner, dispatcher):
        await set_recipients(storage, [{"email": "a@example.com"}])
        result = await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        assert result is None
        assert await storage.get_all_reports() == []
        assert reasoner.summary_calls == 0
        assert dispatcher.sent == []

    @pytest.mark.asyncio
    async def test_no_recipients_is_a_no_op(self, storage, reasoner, dispatcher):
        await seed_trends(storage, count=5)
        await set_recipients(storage, [])

        result = await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        assert result is None
        assert await storage.get_all_reports() == []
        assert dispatcher.sent == []

    @pytest.mark.asyncio
    async def test_missing_recipients_setting_is_a_no_op(self, storage, reasoner, dispatcher):
        await seed_trends(storage, count=1)
        result = await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        assert result is None
        assert dispatcher.sent == []

    @pytest.mark.asyncio
    async def test_recipient_read_error_treated_as_empty(self, storage, reasoner, dispatcher):
        await seed_trends(storage, count=1)
        storage.get_setting = AsyncMock(side_effect=RuntimeError("db down"))

        result = await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        assert result is None
        assert await storage.get_all_reports() == []

    @pytest.mark.asyncio
    async def test_sends_and_records_report(self, storage, reasoner, dispatcher):
        await seed_trends(storage, count=5, suggestions=4)
        await set_recipients(
            storage, [{"email": "a@example.com", "name": "Ana"}, {"email": "b@example.com"}]
        )

        report = await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        assert report.status == ReportStatus.SENT
        assert report.trends_count == 5
        assert report.suggestions_count == 4
        assert report.emails_sent == 2
        assert report.content["summary"] == reasoner.summary
        assert len(report.content["trends"]) == 5
        assert len(await storage.get_all_reports()) == 1

        recipients, template = dispatcher.sent[0]
        assert [r.email for r in recipients] == ["a@example.com", "b@example.com"]
        assert template.subject.startswith("🔥 Daily Cultural Trends Report - ")
        assert reasoner.summary in template.text

    @pytest.mark.asyncio
    async def test_snapshot_capped_at_ten(self, storage, reasoner, dispatcher):
        await seed_trends(storage, count=12, suggestions=11)
        await set_recipients(storage, ["a@example.com"])

        report = await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        assert report.trends_count == 12
        assert len(report.content["trends"]) == 10
        assert len(report.content["suggestions"]) == 10

    @pytest.mark.asyncio
    async def test_summary_failure_records_failed_report(self, storage, dispatcher):
        await seed_trends(storage, count=3)
        await set_recipients(storage, ["a@example.com"])
        reasoner = StubReasoner(fail_on="summarize")

        with pytest.raises(ReasonerError):
            await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        reports = await storage.get_all_reports()
        assert len(reports) == 1
        assert reports[0].status == ReportStatus.FAILED
        assert reports[0].emails_sent == 0
        assert reports[0].trends_count == 0
        assert reports[0].content == {"error": "summarize failed"}
        assert dispatcher.sent == []

    @pytest.mark.asyncio
    async def test_dispatch_failure_records_failed_report(self, storage, reasoner):
        await seed_trends(storage, count=3)
        await set_recipients(storage, ["ok@example.com", "bad@example.com"])
        dispatcher = StubDispatcher(fail_for="bad@example.com")

        with pytest.raises(EmailDispatchError):
            await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        reports = await storage.get_all_reports()
        assert len(reports) == 1
        assert reports[0].status == ReportStatus.FAILED
        assert reports[0].emails_sent == 0
        assert "bad@example.com" in reports[0].content["error"]

    @pytest.mark.asyncio
    async def test_summary_receives_top_three(self, storage, dispatcher):
        await seed_trends(storage, count=5, suggestions=5)
        await set_recipients(storage, ["a@example.com"])
        reasoner = StubReasoner()
        reasoner.summarize = AsyncMock(return_value="Summary")

        await ReportPipeline(storage, reasoner, dispatcher).run_report_cycle()

        trends, suggestions = reasoner.summarize.call_args.args
        assert len(trends) == 3
        assert len(suggestions) == 3

    @pytest.mark.asyncio
    async def test_dispatch_not_cut_by_reasoner_deadline(self, storage, reasoner):
        class SlowDispatcher(StubDispatcher):
            async def send(self, recipients, template):
                await asyncio.sleep(0.2)
                return await super().send(recipients, template)

        await seed_trends(storage, count=2, suggestions=0)
        await set_recipients(storage, ["a@example.com"])
        dispatcher = SlowDispatcher()

        report = await ReportPipeline(
            storage, reasoner, dispatcher, timeout=0.05
        ).run_report_cycle()

        assert report.status == ReportStatus.SENT
        assert len(dispatcher.sent) == 1
