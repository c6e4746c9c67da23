from uuid import UUID

from src.app.repositories.errors import StoreUnavailableError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import STORE_UNAVAILABLE, USER_NOT_FOUND
from src.domain.entities import User
from src.libs.result import Result, Return
from .dtos import ProfileResponse


def to_profile(user: User) -> ProfileResponse:
    return ProfileResponse(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        age=user.age,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class GetProfileUseCase:
    """Load the authenticated user's profile"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[ProfileResponse]:
        try:
            async with self.uow:
                user = await self.uow.users.get_by_id(user_id)
                if user is None:
                    return Return.err(USER_NOT_FOUND)

                profile = to_profile(user)
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        return Return.ok(profile)
