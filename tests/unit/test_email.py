"""Tests for the daily report email template and the SMTP dispatcher."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from trendscope.core.errors import EmailConfigError, EmailDispatchError
from trendscope.models.report_models import EmailRecipient
from trendscope.models.trend_models import Impact
from trendscope.notifications.email_dispatcher import EmailDispatcher
from trendscope.notifications.email_templates import format_report_date, render_trend_report
from tests.fixtures import make_suggestion, make_trend


class TestTemplate:
    def test_subject_and_sections(self):
        template = render_trend_report(
            [make_trend("Quiet Luxury", trend_score=91)],
            [make_suggestion("Capsule drop", impact=Impact.HIGH)],
            "Big week for basics.",
            date="Monday, June 2, 2025",
        )

        assert template.subject == "🔥 Daily Cultural Trends Report - Monday, June 2, 2025"
        assert "<!DOCTYPE html>" in template.html
        assert "1. Quiet Luxury" in template.html
        assert "Score: 91/100" in template.html
        assert "reddit: 120" in template.html
        assert "high Impact" in template.html
        assert "Big week for basics." in template.text
        assert "1. Quiet Luxury (Score: 91/100)" in template.text
        assert "• Capsule drop (high impact, medium effort)" in template.text

    def test_only_top_three(self):
        trends = [make_trend(f"Trend {i}") for i in range(5)]
        suggestions = [make_suggestion(f"Idea {i}") for i in range(5)]
        template = render_trend_report(trends, suggestions, "Summary", date="today")

        assert "Trend 2" in template.text
        assert "Trend 3" not in template.text
        assert "Idea 3" not in template.html

    def test_html_is_escaped(self):
        template = render_trend_report(
            [make_trend("<script>alert(1)</script>")], [], "a & b", date="today"
        )
        assert "<script>alert(1)</script>" not in template.html
        assert "a &amp; b" in template.html

    def test_format_report_date(self):
        assert format_report_date(datetime(2025, 6, 2)) == "Monday, June 2, 2025"


def smtp_mock(mock_smtp):
    server = MagicMock()
    mock_smtp.return_value.__enter__ = MagicMock(return_value=server)
    mock_smtp.return_value.__exit__ = MagicMock(return_value=False)
    return server


class TestEmailDispatcher:
    TEMPLATE = render_trend_report([make_trend()], [], "Summary", date="today")

    def dispatcher(self, **overrides) -> EmailDispatcher:
        kwargs = dict(
            host="smtp.example.com",
            port=587,
            username="bot@example.com",
            password="secret",
            use_tls=True,
        )
        kwargs.update(overrides)
        return EmailDispatcher(**kwargs)

    @pytest.mark.asyncio
    async def test_requires_credentials(self):
        with pytest.raises(EmailConfigError, match="Email credentials not configured"):
            await self.dispatcher(password="").send(
                [EmailRecipient(email="a@example.com")], self.TEMPLATE
            )

    @pytest.mark.asyncio
    @patch("trendscope.notifications.email_dispatcher.smtplib.SMTP")
    async def test_one_message_per_recipient(self, mock_smtp):
        server = smtp_mock(mock_smtp)
        recipients = [
            EmailRecipient(email="a@example.com", name="Ana"),
            EmailRecipient(email="b@example.com"),
        ]

        sent = await self.dispatcher().send(recipients, self.TEMPLATE)

        assert sent == 2
        assert server.starttls.call_count == 2
        server.login.assert_called_with("bot@example.com", "secret")
        assert server.send_message.call_count == 2
        to_headers = sorted(c.args[0]["To"] for c in server.send_message.call_args_list)
        assert to_headers == ["Ana <a@example.com>", "b@example.com"]

    @pytest.mark.asyncio
    @patch("trendscope.notifications.email_dispatcher.smtplib.SMTP_SSL")
    async def test_ssl_when_tls_disabled(self, mock_smtp_ssl):
        server = smtp_mock(mock_smtp_ssl)

        await self.dispatcher(use_tls=False, port=465).send(
            [EmailRecipient(email="a@example.com")], self.TEMPLATE
        )

        server.starttls.assert_not_called()
        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    @patch("trendscope.notifications.email_dispatcher.smtplib.SMTP")
    async def test_any_failure_fails_batch(self, mock_smtp):
        import smtplib

        server = smtp_mock(mock_smtp)

        def send_message(msg):
            if msg["To"] == "bad@example.com":
                raise smtplib.SMTPRecipientsRefused({"bad@example.com": (550, b"no")})

        server.send_message.side_effect = send_message

        with pytest.raises(EmailDispatchError, match="bad@example.com"):
            await self.dispatcher().send(
                [EmailRecipient(email="ok@example.com"), EmailRecipient(email="bad@example.com")],
                self.TEMPLATE,
            )

    @pytest.mark.asyncio
    @patch("trendscope.notifications.email_dispatcher.smtplib.SMTP")
    async def test_smtp_connection_uses_timeout(self, mock_smtp):
        smtp_mock(mock_smtp)

        await self.dispatcher(timeout=7.5).send(
            [EmailRecipient(email="a@example.com")], self.TEMPLATE
        )

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=7.5)

    def test_is_configured(self):
        assert self.dispatcher().is_configured() is True
        assert self.dispatcher(username="").is_configured() is False
