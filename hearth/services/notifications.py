"""Notification gateway: template-rendered e-mail behind a small protocol.

Delivery is best-effort. A notifier reports what happened through a
``NotificationOutcome`` and never raises into the caller.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from hearth.core.config import Settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

PROPERTY_INQUIRY = "property_inquiry"
INQUIRY_RESPONSE = "inquiry_response"
MEETING_SCHEDULED = "meeting_scheduled"

SUBJECTS = {
    PROPERTY_INQUIRY: "New inquiry for {{ property.title }}",
    INQUIRY_RESPONSE: "Response to your inquiry about {{ property.title }}",
    MEETING_SCHEDULED: "Meeting scheduled for {{ property.title }}",
}


@dataclass(frozen=True)
class Recipient:
    email: str
    name: str


@dataclass(frozen=True)
class NotificationOutcome:
    delivered: bool
    recipient: str
    template_id: str
    error: str | None = None


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text: str
    html: str


class Notifier(Protocol):
    def notify(
        self, recipient: Recipient, template_id: str, context: dict[str, Any]
    ) -> NotificationOutcome: ...


class EmailTemplates:
    """Jinja2 templates, one ``.txt`` and one ``.html`` per template id."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR, client_url: str = ""):
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"], default_for_string=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["client_url"] = client_url.rstrip("/")

    def render(self, template_id: str, context: dict[str, Any]) -> RenderedEmail:
        if template_id not in SUBJECTS:
            raise TemplateError(f"Unknown email template: {template_id}")
        subject = self.env.from_string(SUBJECTS[template_id]).render(context)
        return RenderedEmail(
            subject=subject.strip(),
            text=self.env.get_template(f"{template_id}.txt").render(context),
            html=self.env.get_template(f"{template_id}.html").render(context),
        )


class LoggingNotifier:
    """Renders messages and logs them instead of sending."""

    def __init__(self, templates: EmailTemplates):
        self.templates = templates

    def notify(
        self, recipient: Recipient, template_id: str, context: dict[str, Any]
    ) -> NotificationOutcome:
        try:
            rendered = self.templates.render(template_id, context)
        except TemplateError as e:
            return NotificationOutcome(False, recipient.email, template_id, str(e))

        logger.info(
            "Email not sent (no SMTP host configured)",
            extra={
                "recipient": recipient.email,
                "template_id": template_id,
                "subject": rendered.subject,
            },
        )
        return NotificationOutcome(True, recipient.email, template_id)


class SmtpNotifier:
    """Renders messages and sends them over SMTP."""

    def __init__(self, templates: EmailTemplates, settings: Settings):
        self.templates = templates
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME
        self.password = settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS
        self.timeout = settings.SMTP_TIMEOUT_SECONDS
        self.sender = formataddr((settings.MAIL_FROM_NAME, settings.MAIL_FROM_EMAIL))

    def build_message(self, recipient: Recipient, rendered: RenderedEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = formataddr((recipient.name, recipient.email))
        message["Subject"] = rendered.subject
        message.set_content(rendered.text)
        message.add_alternative(rendered.html, subtype="html")
        return message

    def notify(
        self, recipient: Recipient, template_id: str, context: dict[str, Any]
    ) -> NotificationOutcome:
        try:
            rendered = self.templates.render(template_id, context)
            message = self.build_message(recipient, rendered)
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (TemplateError, smtplib.SMTPException, OSError) as e:
            return NotificationOutcome(False, recipient.email, template_id, str(e))

        return NotificationOutcome(True, recipient.email, template_id)


def build_notifier(settings: Settings) -> Notifier:
    """Pick the transport for the configured environment."""
    templates = EmailTemplates(client_url=settings.CLIENT_URL)
    if settings.SMTP_HOST:
        logger.info("Using SMTP notifier", extra={"smtp_host": settings.SMTP_HOST})
        return SmtpNotifier(templates, settings)
    logger.info("SMTP_HOST not set; notifications will be logged")
    return LoggingNotifier(templates)
