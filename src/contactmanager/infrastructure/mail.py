"""SMTP alert sender: tells the administrator that a contact was saved."""

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr

from contactmanager.application.errors import TransportError

logger = logging.getLogger(__name__)

ALERT_SUBJECT = "ContactManager System Alert"
DEFAULT_SENDER = "noreply@contactmanager.com"
DEFAULT_RECIPIENT = "Admin@contactmanager.com"


@dataclass(frozen=True)
class SmtpSettings:
    host: str = "127.0.0.1"
    port: int = 25
    starttls: bool = False
    timeout: float = 10.0
    sender: str = DEFAULT_SENDER
    recipient: str = DEFAULT_RECIPIENT


def build_alert_message(contact_id: str, settings: SmtpSettings) -> EmailMessage:
    """Plain-text alert for one contact."""
    message = EmailMessage()
    message["From"] = formataddr(("noreply", settings.sender))
    message["To"] = formataddr(("SysAdmin", settings.recipient))
    message["Subject"] = ALERT_SUBJECT
    message.set_content(f"Contact with id:{contact_id} was updated")
    return message


class SmtpAlertSender:
    """Sends alerts through an SMTP relay, unauthenticated.

    With starttls enabled the connection is upgraded using the default
    (verifying) SSL context; certificate checks are never switched off.
    """

    def __init__(self, settings: SmtpSettings | None = None) -> None:
        self._settings = settings or SmtpSettings()

    def send_contact_updated(self, contact_id: str) -> None:
        settings = self._settings
        message = build_alert_message(contact_id, settings)
        logger.info("Sending alert for contact %s via %s:%s", contact_id, settings.host, settings.port)
        try:
            with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout) as client:
                if settings.starttls:
                    client.starttls(context=ssl.create_default_context())
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"SMTP delivery to {settings.host}:{settings.port} failed: {e}") from e


class NullAlertSender:
    """Used when alerts are disabled."""

    def send_contact_updated(self, contact_id: str) -> None:
        logger.debug("Alerts disabled; not mailing for contact %s", contact_id)
