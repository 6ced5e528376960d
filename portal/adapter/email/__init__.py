"""Outbound email adapter."""

from .smtp import MockEmailSender, SmtpEmailSender

__all__ = ["MockEmailSender", "SmtpEmailSender"]
