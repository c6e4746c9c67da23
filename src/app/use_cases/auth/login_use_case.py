"""
Login Use Case

Checks email and password and issues a session token.
"""

import logging

from src.app.repositories.errors import StoreUnavailableError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_issuer import SessionIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import STORE_UNAVAILABLE
from src.libs.result import Error, Result, Return
from .dtos import LoginResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")


class LoginUseCase:
    """
    Use case for user login and session token issuance.

    Business Rules:
    - Unknown email and wrong password fail identically (no enumeration)
    - A password hash is always checked, even for unknown emails
    - The password policy is not applied here
    - Session token is scoped to the user id and expires in 7 days
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        session_issuer: SessionIssuer,
    ):
        self.uow = uow
        self.hasher = hasher
        self.session_issuer = session_issuer

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing the session token, or Error
        """
        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(email)

                if user is None:
                    # Keep timing comparable with the wrong-password path
                    self.hasher.dummy_verify()
                    logger.info("Login failed: unknown email")
                    return Return.err(INVALID_CREDENTIALS)

                if not self.hasher.verify(password, user.password_hash):
                    logger.info("Login failed: wrong password for user %s", user.id)
                    return Return.err(INVALID_CREDENTIALS)

                token = self.session_issuer.issue(user.id)
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        return Return.ok(LoginResponse(token=token))
