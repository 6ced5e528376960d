"""SMTP email sender."""

import asyncio
import smtplib
from email.message import EmailMessage

import logfire

from portal.domain.error import EmailDeliveryError
from portal.domain.service.email_sender import EmailSender
from portal.util.logging import get_logger

logger = get_logger(__name__)


class SmtpEmailSender(EmailSender):
    """Sends plain-text email through an SMTP relay.

    smtplib is blocking, so each message is sent in a worker thread.
    """

    def __init__(
        self,
        host: str | None,
        port: int,
        username: str | None,
        password: str | None,
        from_email: str,
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.use_tls = use_tls
        self.timeout = timeout

    def is_configured(self) -> bool:
        configured = bool(self.host and self.username and self.password)
        if not configured:
            logger.warning(
                "SMTP not configured: host=%s username=%s password=%s",
                "set" if self.host else "missing",
                "set" if self.username else "missing",
                "set" if self.password else "missing",
            )
        return configured

    async def send(self, to: str, subject: str, text: str) -> bool:
        if not self.is_configured():
            return False

        try:
            message = EmailMessage()
            message["Subject"] = subject
            message["From"] = self.from_email
            message["To"] = to
            message.set_content(text)
        except (ValueError, TypeError) as e:
            # Header values reject control characters such as CR/LF
            logfire.warn("Email message could not be built", to=to, error=str(e))
            raise EmailDeliveryError(f"Invalid message: {e}") from e

        with logfire.span("smtp.send", to=to, host=self.host, port=self.port):
            try:
                await asyncio.to_thread(self._deliver, message)
            except (smtplib.SMTPException, OSError) as e:
                logfire.warn("Email delivery failed", to=to, error=str(e))
                raise EmailDeliveryError(str(e)) from e

        logfire.info("Email sent", to=to)
        return True

    def _deliver(self, message: EmailMessage) -> None:
        # Port 465 speaks TLS from the first byte
        if self.port == 465:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout
            )
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with server:
            if self.port != 465 and self.use_tls:
                server.starttls()
            server.login(self.username or "", self.password or "")
            server.send_message(message)


class MockEmailSender(EmailSender):
    """Records messages instead of sending them.

    Addresses in ``failing`` raise EmailDeliveryError; addresses in
    ``refused`` make ``send`` return False.
    """

    def __init__(self, configured: bool = True) -> None:
        self.configured = configured
        self.sent: list[tuple[str, str, str]] = []
        self.failing: set[str] = set()
        self.refused: set[str] = set()

    def is_configured(self) -> bool:
        return self.configured

    async def send(self, to: str, subject: str, text: str) -> bool:
        if to in self.failing:
            raise EmailDeliveryError("550 Mailbox unavailable")
        if to in self.refused:
            return False
        self.sent.append((to, subject, text))
        return True
