"""TrendScope — SMTP Email Dispatcher.

One message per recipient. Sends run in worker threads so the event loop
keeps serving while SMTP blocks. Sends are bounded by the SMTP socket
timeout inside each thread, not by a coroutine deadline.
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional, Sequence

from trendscope.config import settings
from trendscope.core.errors import EmailConfigError, EmailDispatchError
from trendscope.core.logging import get_logger
from trendscope.models.report_models import EmailRecipient, EmailTemplate

logger = get_logger("notifications.email")


class EmailDispatcher:
    """Delivers a rendered template to a list of recipients."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        from_name: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = settings.email_user if username is None else username
        self.password = settings.email_password if password is None else password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.from_name = from_name or settings.email_from_name
        self.timeout = settings.smtp_timeout_seconds if timeout is None else timeout

    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def _build_message(self, recipient: EmailRecipient, template: EmailTemplate) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = template.subject
        msg["From"] = formataddr((self.from_name, self.username))
        msg["To"] = formataddr((recipient.name or "", recipient.email))
        msg.attach(MIMEText(template.text, "plain", "utf-8"))
        msg.attach(MIMEText(template.html, "html", "utf-8"))
        return msg

    def _send_one(self, recipient: EmailRecipient, template: EmailTemplate) -> None:
        msg = self._build_message(recipient, template)
        try:
            if self.use_tls:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls()
                    server.login(self.username, self.password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                    server.login(self.username, self.password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"✗ Failed to send email to {recipient.email}: {e}")
            raise EmailDispatchError(
                f"Failed to send email to {recipient.email}: {e}", recipient.email
            ) from e
        logger.info(f"✓ Email sent successfully to {recipient.email}")

    async def send(
        self, recipients: Sequence[EmailRecipient], template: EmailTemplate
    ) -> int:
        """Send ``template`` to every recipient; any failure fails the batch.

        Returns the number of recipients.
        """
        if not self.is_configured():
            raise EmailConfigError(
                "Email credentials not configured. Please set EMAIL_USER and "
                "EMAIL_PASSWORD environment variables."
            )
        logger.info(
            f"Sending email to {len(recipients)} recipient(s) via {self.host}:{self.port} "
            f"(TLS: {self.use_tls})"
        )
        await asyncio.gather(
            *(asyncio.to_thread(self._send_one, r, template) for r in recipients)
        )
        return len(recipients)
