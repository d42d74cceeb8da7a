"""Email service for sending expiry summary emails via SMTP."""

import html
import re
import smtplib
from collections.abc import Sequence
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from django.conf import settings
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string

import structlog

from core.enums import SummaryEmailKind
from core.models import InventoryItem, User
from core.services.notification_templates import EMAIL_TEMPLATES

logger = structlog.get_logger(__name__)

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_TAG_PATTERN = re.compile(r"<[^>]+>")
_BLANK_LINES_PATTERN = re.compile(r"\n\s*\n")


class EmailService:
    """Service for sending emails via SMTP.

    ``send_email`` raises on failure; the summary helpers used by the
    scheduler are best-effort and convert every failure into ``False``.
    """

    def __init__(self) -> None:
        """Initialize email service with SMTP configuration."""
        self.enabled = settings.EMAIL_ENABLED
        self.smtp_host = settings.EMAIL_HOST
        self.smtp_port = settings.EMAIL_PORT
        self.smtp_user = settings.EMAIL_HOST_USER
        self.smtp_password = settings.EMAIL_HOST_PASSWORD
        self.use_tls = settings.EMAIL_USE_TLS
        self.from_email = settings.DEFAULT_FROM_EMAIL
        self.frontend_url = settings.FRONTEND_URL

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        from_email: str | None = None,
    ) -> bool:
        """Deliver one HTML email (with a plain-text alternative) over SMTP.

        Raises:
            ValueError: If the recipient address is malformed
            smtplib.SMTPException: If the SMTP conversation fails
        """
        if not self._is_valid_email(to_email):
            raise ValueError(f"Invalid email address: {to_email}")

        message = self._build_message(
            to_email, subject, html_content, from_email or self.from_email
        )

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(message)
        except smtplib.SMTPException as e:
            logger.error(
                "Failed to send email", to_email=to_email, subject=subject, error=str(e)
            )
            raise

        logger.info("Email sent successfully", to_email=to_email, subject=subject)
        return True

    def _build_message(
        self, to_email: str, subject: str, html_content: str, sender: str
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = sender
        message["To"] = to_email
        # Clients show the last part they can render, so HTML goes last
        message.attach(MIMEText(self._html_to_plain(html_content), "plain"))
        message.attach(MIMEText(html_content, "html"))
        return message

    def send_daily_expiry_email(
        self, user: User, items: Sequence[InventoryItem], today: date | None = None
    ) -> bool:
        """Send the daily "items expiring soon" email. Never raises."""
        return self._send_summary(SummaryEmailKind.DAILY, user, items, today)

    def send_weekly_expiry_email(
        self, user: User, items: Sequence[InventoryItem], today: date | None = None
    ) -> bool:
        """Send the Sunday weekly expiry summary. Never raises."""
        return self._send_summary(SummaryEmailKind.WEEKLY, user, items, today)

    def _send_summary(
        self,
        kind: SummaryEmailKind,
        user: User,
        items: Sequence[InventoryItem],
        today: date | None,
    ) -> bool:
        if not self.enabled:
            logger.info("Email sending disabled", kind=kind.value, user_id=str(user.user_id))
            return False

        template_config = EMAIL_TEMPLATES[kind]
        context = self._summary_context(user, items, today)

        try:
            html_content = render_to_string(template_config["template"], context)
            return self.send_email(
                to_email=user.email,
                subject=template_config["subject"].format(**context),
                html_content=html_content,
            )
        except (smtplib.SMTPException, OSError, ValueError, TemplateDoesNotExist) as e:
            logger.error(
                "Failed to send summary email",
                kind=kind.value,
                user_id=str(user.user_id),
                error=str(e),
            )
            return False

    def _summary_context(
        self, user: User, items: Sequence[InventoryItem], today: date | None
    ) -> dict[str, Any]:
        rows = []
        for item in items:
            days_left = (
                (item.expiration_date - today).days
                if today and item.expiration_date
                else None
            )
            rows.append(
                {
                    "name": item.item_name,
                    "expiration_date": item.expiration_date,
                    "quantity": item.quantity,
                    "category": item.category,
                    "days_left": days_left,
                }
            )
        return {
            "first_name": user.display_name,
            "items": rows,
            "item_count": len(rows),
            "inventory_url": f"{self.frontend_url}/inventory",
        }

    def _is_valid_email(self, email: str | None) -> bool:
        return bool(email and _EMAIL_PATTERN.match(email))

    def _html_to_plain(self, html_content: str) -> str:
        """Strip tags and entities, collapsing runs of blank lines."""
        text = html.unescape(_TAG_PATTERN.sub("", html_content))
        return _BLANK_LINES_PATTERN.sub("\n\n", text).strip()
