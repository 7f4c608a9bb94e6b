"""
Console Email Service
=====================

EmailService implementation that writes messages to the log instead of
delivering them. Sent messages are kept in memory for inspection.
"""
import logging
from dataclasses import dataclass
from typing import List

from wayfarer.domain.services.email_service import EmailService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentEmail:
    to: str
    subject: str
    body: str


class ConsoleEmailService(EmailService):
    """Log-only e-mail sender."""

    def __init__(self, public_url: str = "http://localhost:8000"):
        self._public_url = public_url.rstrip("/")
        self.sent: List[SentEmail] = []

    async def _send(self, to: str, subject: str, body: str) -> None:
        self.sent.append(SentEmail(to=to, subject=subject, body=body))
        logger.info(f"Email to {to}: {subject}")
        logger.debug(body)

    async def send_welcome_email(self, email: str, name: str) -> None:
        await self._send(
            email,
            "Welcome to Wayfarer",
            f"Hi {name},\n\nYour account is ready. Start exploring at {self._public_url}.",
        )

    async def send_editor_invitation_email(
        self,
        email: str,
        inviter_name: str,
        place_name: str,
        permission_id: str,
    ) -> None:
        await self._send(
            email,
            f"{inviter_name} invited you to edit {place_name}",
            f"{inviter_name} invited you to co-edit \"{place_name}\".\n\n"
            f"Accept the invitation: {self._public_url}/invitations/{permission_id}/accept",
        )

    async def send_report_notification_email(
        self,
        email: str,
        admin_name: str,
        report_id: str,
        entity_type: str,
        report_type: str,
    ) -> None:
        await self._send(
            email,
            f"New {report_type} report on a {entity_type}",
            f"Hi {admin_name},\n\nA new report is waiting for review: "
            f"{self._public_url}/admin/reports/{report_id}",
        )

    async def send_password_reset_email(self, email: str, name: str, token: str) -> None:
        await self._send(
            email,
            "Reset your Wayfarer password",
            f"Hi {name},\n\nChoose a new password: {self._public_url}/reset-password?token={token}\n\n"
            "The link expires in 24 hours. Ignore this e-mail if you did not ask for it.",
        )
