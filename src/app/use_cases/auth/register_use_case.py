import logging

from src.app.repositories.errors import DuplicateEmailError, StoreUnavailableError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import (
    EMAIL_ALREADY_EXISTS,
    MINIMUM_AGE,
    MISSING_FIELDS,
    STORE_UNAVAILABLE,
    UNDERAGE,
    is_blank,
)
from src.domain.entities import User
from src.domain.password_policy import check_password
from src.libs.result import Result, Return
from .dtos import RegisterCommand, RegisterResponse

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand
    - Output: Result[RegisterResponse]

    Business Logic:
    1. Every field present (MISSING_FIELDS)
    2. Age at least 18 (UNDERAGE)
    3. Password passes the password policy (PASSWORD_*)
    4. Email not already registered (EMAIL_ALREADY_EXISTS)
    5. Hash password with bcrypt, create User, commit
    6. Return id and email; no session is issued
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with profile fields, email and password

        Returns:
            Result[RegisterResponse] with the new user's id and email,
            or Error on validation, policy, conflict or store failure
        """
        required = (
            command.first_name,
            command.last_name,
            command.age,
            command.email,
            command.password,
        )
        if any(is_blank(value) for value in required):
            return Return.err(MISSING_FIELDS)

        if command.age < MINIMUM_AGE:
            return Return.err(UNDERAGE)

        policy = check_password(command.password)
        if policy.is_err():
            return Return.err(policy.error)

        try:
            async with self.uow:
                existing_user = await self.uow.users.get_by_email(command.email)
                if existing_user:
                    return Return.err(EMAIL_ALREADY_EXISTS)

                user = User(
                    first_name=command.first_name.strip(),
                    last_name=command.last_name.strip(),
                    age=command.age,
                    email=command.email,
                    password_hash=self.hasher.hash(command.password),
                )
                user = await self.uow.users.create(user)

                await self.uow.commit()
                response = RegisterResponse(id=str(user.id), email=user.email)
        except DuplicateEmailError:
            # Lost a race with a concurrent registration for the same email
            return Return.err(EMAIL_ALREADY_EXISTS)
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        logger.info("Registered user %s", response.id)
        return Return.ok(response)
