"""Email infrastructure providers."""

from dishka import Scope, provide

from portal.adapter.email import SmtpEmailSender
from portal.config import Settings
from portal.domain.service import EmailSender
from portal.util.di.base import ProviderBase


class EmailProvider(ProviderBase):
    """Email component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider using SMTP."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_email_sender(self, settings: Settings) -> EmailSender:
        """Provide SMTP email sender."""
        return SmtpEmailSender(
            host=settings.email.smtp_host,
            port=settings.email.smtp_port,
            username=settings.email.smtp_username,
            password=settings.email.smtp_password,
            from_email=settings.email.from_email,
            use_tls=settings.email.use_tls,
        )
