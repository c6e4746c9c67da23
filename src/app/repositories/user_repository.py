from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """
    User repository interface - application layer

    Every method is atomic for a single record. Implementations raise
    StoreUnavailableError on infrastructure failure and DuplicateEmailError
    when an email uniqueness constraint is hit.
    """

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist profile changes of an existing user"""
        pass

    @abstractmethod
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        """Overwrite the stored password hash"""
        pass

    @abstractmethod
    async def set_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> None:
        """Store a pending reset, replacing any previous one"""
        pass

    @abstractmethod
    async def clear_reset_token(self, user_id: UUID) -> None:
        """Drop the pending reset, if any"""
        pass

    @abstractmethod
    async def get_by_valid_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Get the user whose pending reset matches token_hash and expires after now"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete a user, returning False if it did not exist"""
        pass
