import logging
from uuid import UUID

from src.app.repositories.errors import DuplicateEmailError, StoreUnavailableError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import (
    EMAIL_ALREADY_EXISTS,
    MINIMUM_AGE,
    MISSING_FIELDS,
    STORE_UNAVAILABLE,
    UNDERAGE,
    USER_NOT_FOUND,
    is_blank,
)
from src.libs.result import Result, Return
from .dtos import ProfileResponse, UpdateProfileCommand
from .get_profile_use_case import to_profile

logger = logging.getLogger(__name__)


class UpdateProfileUseCase:
    """
    Partially update the authenticated user's profile.

    Business Rules:
    - Only provided fields change; provided text fields must not be blank
    - Age must stay at least 18
    - A new email must not belong to another user
    - The password is not changed here (see ChangePasswordUseCase)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: UpdateProfileCommand
    ) -> Result[ProfileResponse]:
        changes = command.model_dump(exclude_none=True)
        if any(is_blank(value) for value in changes.values()):
            return Return.err(MISSING_FIELDS)

        if command.age is not None and command.age < MINIMUM_AGE:
            return Return.err(UNDERAGE)

        try:
            async with self.uow:
                user = await self.uow.users.get_by_id(user_id)
                if user is None:
                    return Return.err(USER_NOT_FOUND)

                if command.email is not None:
                    owner = await self.uow.users.get_by_email(command.email)
                    if owner is not None and owner.id != user.id:
                        return Return.err(EMAIL_ALREADY_EXISTS)

                for field, value in changes.items():
                    setattr(user, field, value.strip() if isinstance(value, str) else value)

                user = await self.uow.users.update(user)
                await self.uow.commit()
                profile = to_profile(user)
        except DuplicateEmailError:
            return Return.err(EMAIL_ALREADY_EXISTS)
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        logger.info("Updated profile of user %s (%s)", user_id, ", ".join(sorted(changes)))
        return Return.ok(profile)
