"""
Password Reset Use Cases
========================

Forgotten-password flow: a single-use token is e-mailed to the account
address and later exchanged for a new password.

Requesting a reset for an unknown address succeeds without doing anything so
the endpoint does not reveal which addresses are registered. Redeeming a
token signs the user out everywhere.
"""
import logging
import secrets
from datetime import timedelta

from wayfarer.application.context import Context
from wayfarer.application.dto.user_dto import PasswordResetRequest, ResetPasswordRequest
from wayfarer.domain.constants.limits import UserLimits
from wayfarer.domain.models.user import PasswordResetToken
from wayfarer.domain.result import ErrorCode, Ok, Result, err, not_found
from wayfarer.domain.services.email_service import EmailDeliveryError
from wayfarer.utils.datetime_utils import now

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid or expired reset token"
EXPIRED_TOKEN = "Reset token has expired"
USED_TOKEN = "Reset token has already been used"


class RequestPasswordResetUseCase:
    def __init__(self, context: Context):
        self._context = context

    async def execute(self, request: PasswordResetRequest) -> Result[bool]:
        user = await self._context.users.find_by_email(request.email)
        if user is None or not user.is_active():
            logger.debug("Password reset requested for an unknown or inactive address")
            return Ok(True)

        reset = await self._context.password_reset_tokens.create(PasswordResetToken(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            expires_at=now() + timedelta(hours=UserLimits.RESET_TOKEN_EXPIRY_HOURS),
        ))
        try:
            await self._context.email_service.send_password_reset_email(user.email, user.name, reset.token)
        except EmailDeliveryError as exc:
            logger.error(f"Password reset email for user {user.id} not sent: {exc}")
            return err(ErrorCode.INTERNAL_ERROR, "Failed to send password reset email", exc)

        logger.info(f"Password reset requested for user {user.id}")
        return Ok(True)


class ResetPasswordUseCase:
    """
    Exchange a reset token for a new password.

    The token check, password write, token redemption and session revocation
    run in one transaction, so a token can be redeemed only once.
    """

    def __init__(self, context: Context):
        self._context = context

    async def execute(self, request: ResetPasswordRequest) -> Result[bool]:
        hashed_password = self._context.password_hasher.hash(request.new_password)

        async def redeem(tx: Context) -> Result[str]:
            reset = await tx.password_reset_tokens.find_by_token(request.token)
            if reset is None:
                return err(ErrorCode.VALIDATION_ERROR, INVALID_TOKEN)
            if reset.is_expired():
                return err(ErrorCode.VALIDATION_ERROR, EXPIRED_TOKEN)
            if reset.is_used():
                return err(ErrorCode.VALIDATION_ERROR, USED_TOKEN)
            if await tx.users.find_by_id(reset.user_id) is None:
                return not_found("User")

            await tx.users.update_password(reset.user_id, hashed_password)
            await tx.password_reset_tokens.mark_used(reset.token, now())
            await tx.sessions.delete_by_user(reset.user_id)
            return Ok(reset.user_id)

        result = await self._context.with_transaction(redeem)
        if result.is_err():
            return result
        logger.info(f"Password reset completed for user {result.unwrap()}")
        return Ok(True)
