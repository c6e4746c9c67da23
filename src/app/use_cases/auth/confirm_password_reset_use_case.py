"""
Confirm Password Reset Use Case

Consumes a reset token and sets the new password.
"""

import logging

from src.app.repositories.errors import StoreUnavailableError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_service import ResetTokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import (
    MISSING_FIELDS,
    PASSWORD_MISMATCH,
    STORE_UNAVAILABLE,
    is_blank,
)
from src.domain.password_policy import check_password
from src.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse

logger = logging.getLogger(__name__)

INVALID_OR_EXPIRED_TOKEN = Error(
    "INVALID_OR_EXPIRED_TOKEN", "Invalid or expired password reset token"
)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token, new password and confirmation are all required
    - New password and confirmation must match; checked before any store access
    - New password must pass the password policy
    - Token is validated by hashing it with SHA-256 and matching the stored
      hash, and must not be expired (1 hour window)
    - Password is re-hashed with bcrypt and the pending reset is cleared,
      so the token works only once
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        token_service: ResetTokenService,
    ):
        self.uow = uow
        self.hasher = hasher
        self.token_service = token_service

    async def execute(
        self, token: str, new_password: str, confirm_password: str
    ) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set
            confirm_password: Repetition of new_password

        Returns:
            Result with confirmation status, or Error

        Errors:
            - MISSING_FIELDS: A field is absent
            - PASSWORD_MISMATCH: new_password != confirm_password
            - PASSWORD_*: New password violates the policy
            - INVALID_OR_EXPIRED_TOKEN: Token unknown, already used or expired
        """
        if any(is_blank(value) for value in (token, new_password, confirm_password)):
            return Return.err(MISSING_FIELDS)

        if new_password != confirm_password:
            return Return.err(PASSWORD_MISMATCH)

        policy = check_password(new_password)
        if policy.is_err():
            return Return.err(policy.error)

        token_hash = self.token_service.hash_token(token)
        now = self.token_service.clock()

        try:
            async with self.uow:
                user = await self.uow.users.get_by_valid_reset_token_hash(token_hash, now)

                pending = user.pending_reset if user is not None else None
                if pending is None or not self.token_service.validate(
                    token, pending.token_hash, pending.expires_at, now
                ):
                    return Return.err(INVALID_OR_EXPIRED_TOKEN)

                user_id = user.id
                await self.uow.users.update_password_hash(
                    user_id, self.hasher.hash(new_password)
                )
                await self.uow.users.clear_reset_token(user_id)

                await self.uow.commit()
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        logger.info("Password reset completed for user %s", user_id)
        return Return.ok(
            ConfirmPasswordResetResponse(
                status="success",
                message="Password has been reset successfully",
            )
        )
