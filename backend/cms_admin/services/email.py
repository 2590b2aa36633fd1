"""Templated email service: console mock unless MAIL_ENABLED=True.

When MAIL_ENABLED is False the rendered message is written to the log instead
of being delivered. With MAIL_ENABLED=True it goes out over SMTP.
"""
import asyncio
import logging
import smtplib
from collections.abc import Mapping
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any

from cms_admin.core.config import Settings, settings as default_settings
from cms_admin.core.errors import EmailDispatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    text: str
    html: str


# ─── Templates ───

EMAIL_TEMPLATES: dict[str, EmailTemplate] = {
    "register-admin": EmailTemplate(
        subject="Welcome, {user[firstname]}! Finish setting up your admin account",
        text=(
            "Hello {user[firstname]} {user[lastname]},\n\n"
            "An administrator account has been created for {user[email]}.\n"
            "Complete your registration here: {url}\n"
        ),
        html=(
            "<p>Hello {user[firstname]} {user[lastname]},</p>"
            "<p>An administrator account has been created for {user[email]}.</p>"
            '<p><a href="{url}">Complete your registration</a></p>'
        ),
    ),
}


def render_template(template_id: str, data: Mapping[str, Any]) -> EmailTemplate:
    """Fill a registered template with ``data``.

    Raises EmailDispatchError for unknown templates or missing placeholders.
    """
    template = EMAIL_TEMPLATES.get(template_id)
    if template is None:
        raise EmailDispatchError(f"Unknown email template '{template_id}'")
    try:
        return EmailTemplate(
            subject=template.subject.format_map(data),
            text=template.text.format_map(data),
            html=template.html.format_map(data),
        )
    except (KeyError, IndexError, TypeError) as exc:
        raise EmailDispatchError(f"Template '{template_id}' is missing value {exc}") from exc


class TemplatedEmailSender:
    def __init__(self, settings: Settings = default_settings) -> None:
        self.settings = settings

    async def send_templated_email(
        self,
        addresses: Mapping[str, str],
        template_id: str,
        data: Mapping[str, Any],
    ) -> None:
        rendered = render_template(template_id, data)
        message = self._build_message(addresses, rendered)

        if not self.settings.MAIL_ENABLED:
            logger.info(
                "EMAIL (console) template=%s to=%s from=%s reply_to=%s subject=%s",
                template_id,
                message["To"],
                message["From"],
                message["Reply-To"],
                message["Subject"],
            )
            return

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDispatchError(f"SMTP delivery failed: {exc}") from exc
        logger.info("Sent email template=%s to=%s", template_id, message["To"])

    @staticmethod
    def _build_message(addresses: Mapping[str, str], rendered: EmailTemplate) -> EmailMessage:
        if not addresses.get("to"):
            raise EmailDispatchError("Email has no recipient")
        message = EmailMessage()
        message["To"] = addresses["to"]
        if addresses.get("from"):
            message["From"] = addresses["from"]
        if addresses.get("replyTo"):
            message["Reply-To"] = addresses["replyTo"]
        message["Subject"] = rendered.subject
        message.set_content(rendered.text)
        message.add_alternative(rendered.html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=30) as server:
            if self.settings.SMTP_USE_TLS:
                server.starttls()
            if self.settings.SMTP_USERNAME:
                server.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
            server.send_message(message)
