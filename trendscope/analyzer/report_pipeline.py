"""TrendScope — Report Pipeline Orchestrator.

Runs one report cycle:
  recent trends → summary → recipients → render → send → record Report

A cycle with nothing to report, or nobody to send to, records nothing.
A failed summary or send records a ``failed`` Report and re-raises.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from trendscope.ai.base_provider import TrendReasoner
from trendscope.config import settings
from trendscope.core.errors import with_deadline
from trendscope.core.logging import get_logger
from trendscope.models.report_models import EmailRecipient, Report, ReportStatus
from trendscope.notifications.email_dispatcher import EmailDispatcher
from trendscope.notifications.email_templates import render_trend_report
from trendscope.storage.base import StorageGateway

logger = get_logger("analyzer.report")

SUMMARY_ITEMS = 3
SNAPSHOT_ITEMS = 10


def parse_recipients(raw: Any) -> List[EmailRecipient]:
    """Turn the ``email_recipients`` setting into recipients.

    Accepts ``{"email": ..., "name": ...}`` objects or bare address strings.
    Entries without an address are skipped.
    """
    recipients = []
    for entry in raw or []:
        if isinstance(entry, str):
            entry = {"email": entry}
        email = entry.get("email") if isinstance(entry, dict) else None
        if not email:
            logger.warning(f"Skipping recipient without email: {entry!r}")
            continue
        recipients.append(EmailRecipient(email=email, name=entry.get("name")))
    return recipients


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


class ReportPipeline:
    """Summarize recent trends and mail the digest."""

    def __init__(
        self,
        storage: StorageGateway,
        reasoner: TrendReasoner,
        dispatcher: EmailDispatcher,
        timeout: Optional[float] = None,
    ):
        self.storage = storage
        self.reasoner = reasoner
        self.dispatcher = dispatcher
        self.timeout = settings.external_call_timeout_seconds if timeout is None else timeout

    async def get_recipients(self) -> List[EmailRecipient]:
        try:
            raw = await self.storage.get_setting_value("email_recipients", [])
        except Exception as e:
            logger.error(f"Could not read email recipients: {e}")
            return []
        return parse_recipients(raw)

    async def run_report_cycle(self, hours: Optional[float] = None) -> Optional[Report]:
        """Run one report cycle.

        Returns the sent Report, or None when there was nothing to send.
        """
        hours = settings.report_lookback_hours if hours is None else hours
        logger.info("📧 Generating daily report", extra={"stage": "report"})

        trends = await self.storage.get_recent_trends(hours)
        suggestions = await self.storage.get_recent_suggestions(hours)
        if not trends:
            logger.info("No trends found for daily report")
            return None

        try:
            summary = await with_deadline(
                self.reasoner.summarize(trends[:SUMMARY_ITEMS], suggestions[:SUMMARY_ITEMS]),
                self.timeout,
                "report summary",
            )

            recipients = await self.get_recipients()
            if not recipients:
                logger.info("No email recipients configured")
                return None

            template = render_trend_report(trends, suggestions, summary)
            await self.dispatcher.send(recipients, template)
            emails_sent = len(recipients)
        except Exception as e:
            logger.error(f"Error generating daily report: {e}", extra={"stage": "report"})
            await self.storage.create_report(
                Report(
                    date=_today(),
                    trends_count=0,
                    suggestions_count=0,
                    status=ReportStatus.FAILED,
                    emails_sent=0,
                    content={"error": str(e)},
                )
            )
            raise

        report = await self.storage.create_report(
            Report(
                date=_today(),
                trends_count=len(trends),
                suggestions_count=len(suggestions),
                status=ReportStatus.SENT,
                emails_sent=emails_sent,
                content={
                    "summary": summary,
                    "trends": [t.model_dump(mode="json") for t in trends[:SNAPSHOT_ITEMS]],
                    "suggestions": [
                        s.model_dump(mode="json") for s in suggestions[:SNAPSHOT_ITEMS]
                    ],
                },
            )
        )
        logger.info(
            f"✅ Daily report sent to {emails_sent} recipients",
            extra={"entity_id": report.id},
        )
        return report
