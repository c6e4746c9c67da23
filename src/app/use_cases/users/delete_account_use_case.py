import logging
from uuid import UUID

from src.app.repositories.errors import StoreUnavailableError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import STORE_UNAVAILABLE, USER_NOT_FOUND
from src.libs.result import Result, Return
from .dtos import DeleteAccountResponse

logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    """
    Permanently delete the authenticated user's account.

    Outstanding session tokens stay cryptographically valid until they expire
    but resolve to a missing user afterwards.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[DeleteAccountResponse]:
        try:
            async with self.uow:
                deleted = await self.uow.users.delete(user_id)
                if not deleted:
                    return Return.err(USER_NOT_FOUND)
                await self.uow.commit()
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        logger.info("Deleted account of user %s", user_id)
        return Return.ok(DeleteAccountResponse(status="deleted", message="Account deleted"))
