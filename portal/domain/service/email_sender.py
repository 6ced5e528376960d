"""Email port."""

from datetime import datetime

INVITER_TOKEN = "{{inviter_username}}"
EXPIRATION_TOKEN = "{{expiration_date}}"
INVITE_URL_TOKEN = "{{invite_url}}"

DEFAULT_INVITE_MESSAGE = (
    "Hello,\n\n"
    "{{inviter_username}} has invited you to create an account.\n\n"
    "Open the link below to sign up:\n"
    "{{invite_url}}\n\n"
    "This invitation expires: {{expiration_date}}\n"
)


def format_expiration(expires: datetime | None) -> str:
    """Expiry as shown in invitation emails."""
    return expires.strftime("%Y-%m-%d %H:%M UTC") if expires else "Never"


class EmailSender:
    """Generic outbound email interface."""

    def is_configured(self) -> bool:
        """Whether emails can be sent at all."""
        raise NotImplementedError

    async def send(self, to: str, subject: str, text: str) -> bool:
        """Send a plain-text email.

        Args:
            to: Recipient address
            subject: Subject line
            text: Body

        Returns:
            True if the message was handed to the transport

        Raises:
            EmailDeliveryError: If the transport rejected the message
        """
        raise NotImplementedError

    def render_template(
        self,
        body: str,
        inviter_name: str,
        expiration_display: str,
        invite_url: str,
    ) -> str:
        """Substitute the invitation tokens in a message body.

        Tokens are replaced literally; anything else is left untouched.
        """
        return (
            body.replace(INVITER_TOKEN, inviter_name)
            .replace(EXPIRATION_TOKEN, expiration_display)
            .replace(INVITE_URL_TOKEN, invite_url)
        )
