"""Recipient notification. Only the address and the message id cross in."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from .config import Settings

logger = logging.getLogger(__name__)

EXPIRY_NOTE = "This link expires in 24 hours."


class NotificationDispatcher(Protocol):
    def dispatch(self, recipient: str, message_id: str) -> None: ...


def build_view_link(base_url: str, message_id: str) -> str:
    return f"{base_url.rstrip('/')}/view/{message_id}"


def build_notification(settings: Settings, recipient: str, message_id: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = settings.smtp_from or settings.smtp_user or "no-reply@localhost"
    msg["To"] = recipient
    msg["Subject"] = "You have received a secure message"
    msg.set_content(
        "You have received a secure message.\n"
        f"View it here: {build_view_link(settings.base_url, message_id)}\n"
        f"{EXPIRY_NOTE}\n"
    )
    return msg


class SmtpDispatcher:
    """Sends the view link by email over SMTP (STARTTLS, or implicit TLS when ``smtp_secure``)."""

    def __init__(self, settings: Settings):
        if not settings.smtp_host:
            raise ValueError("SMTP_HOST is not configured")
        self.settings = settings

    def dispatch(self, recipient: str, message_id: str) -> None:
        s = self.settings
        msg = build_notification(s, recipient, message_id)
        smtp_cls = smtplib.SMTP_SSL if s.smtp_secure else smtplib.SMTP
        with smtp_cls(s.smtp_host, s.smtp_port, timeout=30) as conn:
            if not s.smtp_secure:
                conn.starttls()
            if s.smtp_user:
                conn.login(s.smtp_user, s.smtp_pass or "")
            conn.send_message(msg)
        logger.info("Notified %s about message %s", recipient, message_id)
