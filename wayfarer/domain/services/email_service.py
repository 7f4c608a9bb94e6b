"""
Email Service Interface
=======================

Outgoing notification e-mails. Delivery failures raise ``EmailDeliveryError``;
callers treat them as non-fatal and log them.
"""
from abc import ABC, abstractmethod
from typing import Optional


class EmailDeliveryError(Exception):
    """Raised when an e-mail could not be handed to the delivery channel."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class EmailService(ABC):
    """Abstract e-mail sender."""

    @abstractmethod
    async def send_welcome_email(self, email: str, name: str) -> None:
        pass

    @abstractmethod
    async def send_editor_invitation_email(
        self,
        email: str,
        inviter_name: str,
        place_name: str,
        permission_id: str,
    ) -> None:
        """
        Invite a user to co-edit a place.

        Args:
            email: Invitee address
            inviter_name: Display name of the inviting user
            place_name: Name of the shared place
            permission_id: Pending permission the invitee accepts
        """
        pass

    @abstractmethod
    async def send_report_notification_email(
        self,
        email: str,
        admin_name: str,
        report_id: str,
        entity_type: str,
        report_type: str,
    ) -> None:
        """Tell an administrator a new report is waiting for review."""
        pass

    @abstractmethod
    async def send_password_reset_email(self, email: str, name: str, token: str) -> None:
        pass
