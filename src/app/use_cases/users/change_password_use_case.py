"""
Change Password Use Case

Lets an authenticated user replace their password after proving they know
the current one.
"""

import logging
from uuid import UUID

from src.app.repositories.errors import StoreUnavailableError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import (
    MISSING_FIELDS,
    PASSWORD_MISMATCH,
    STORE_UNAVAILABLE,
    USER_NOT_FOUND,
    is_blank,
)
from src.domain.password_policy import check_password
from src.libs.result import Error, Result, Return
from .dtos import ChangePasswordResponse

logger = logging.getLogger(__name__)

CURRENT_PASSWORD_INCORRECT = Error(
    "CURRENT_PASSWORD_INCORRECT", "Current password incorrect"
)


class ChangePasswordUseCase:
    """
    Business Rules:
    - Current, new and confirmation passwords are required
    - New password and confirmation must match
    - New password must pass the password policy
    - Current password must verify against the stored hash
    - Any pending password reset is invalidated
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> Result[ChangePasswordResponse]:
        fields = (current_password, new_password, confirm_password)
        if any(is_blank(value) for value in fields):
            return Return.err(MISSING_FIELDS)

        if new_password != confirm_password:
            return Return.err(PASSWORD_MISMATCH)

        policy = check_password(new_password)
        if policy.is_err():
            return Return.err(policy.error)

        try:
            async with self.uow:
                user = await self.uow.users.get_by_id(user_id)
                if user is None:
                    return Return.err(USER_NOT_FOUND)

                if not self.hasher.verify(current_password, user.password_hash):
                    return Return.err(CURRENT_PASSWORD_INCORRECT)

                await self.uow.users.update_password_hash(
                    user.id, self.hasher.hash(new_password)
                )
                await self.uow.users.clear_reset_token(user.id)

                await self.uow.commit()
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        logger.info("Password changed for user %s", user_id)
        return Return.ok(
            ChangePasswordResponse(status="success", message="Password changed")
        )
