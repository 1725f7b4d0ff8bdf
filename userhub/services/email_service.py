"""Email service using SendGrid."""

import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from userhub.config import Settings, settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Email could not be handed to SendGrid."""


class EmailService:
    """Service for sending transactional emails via SendGrid.

    When ``email_enabled`` is off (local development), messages are logged
    and dropped. When it is on, every failure raises ``EmailDeliveryError``.
    """

    def __init__(self, config: Settings = settings) -> None:
        self._enabled = config.email_enabled
        self._api_key = config.sendgrid_api_key
        self._from = (config.email_from_address, config.email_from_name)

    def send(self, to_email: str, subject: str, html_content: str) -> None:
        """Send an HTML email."""
        if not self._enabled:
            logger.warning(f"Email disabled, not sending '{subject}' to {to_email}")
            return

        if not self._api_key:
            raise EmailDeliveryError("SendGrid API key not configured")

        message = Mail(
            from_email=self._from,
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
        )

        try:
            sg = SendGridAPIClient(self._api_key)
            response = sg.send(message)
        except Exception as e:
            logger.exception(f"Failed to send email to {to_email}")
            raise EmailDeliveryError(f"failed to send email: {e}") from e

        logger.info(f"Email sent to {to_email}, status: {response.status_code}")
        if response.status_code not in (200, 201, 202):
            raise EmailDeliveryError(f"SendGrid returned status {response.status_code}")
