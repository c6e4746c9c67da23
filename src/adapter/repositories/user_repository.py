import functools
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import DuplicateEmailError, StoreUnavailableError
from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import PendingReset, User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def translate_errors(method):
    """Re-raise SQLAlchemy failures as store errors the application layer understands"""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateEmailError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.error("User store failure in %s: %s", method.__name__, exc)
            raise StoreUnavailableError(str(exc)) from exc

    return wrapper


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @translate_errors
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == normalize_email(email))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    @translate_errors
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    @translate_errors
    async def create(self, user: User) -> User:
        """Create a new user"""
        user.email = normalize_email(user.email)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    @translate_errors
    async def update(self, user: User) -> User:
        """Update existing user"""
        user.email = normalize_email(user.email)
        user.touch()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def _get_for_write(self, user_id: UUID) -> Optional[User]:
        user = await self.session.get(User, user_id)
        if user is None:
            logger.warning("User %s vanished before write", user_id)
        return user

    @translate_errors
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        user = await self._get_for_write(user_id)
        if user is None:
            return
        user.password_hash = password_hash
        user.touch()
        self.session.add(user)
        await self.session.flush()

    @translate_errors
    async def set_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> None:
        user = await self._get_for_write(user_id)
        if user is None:
            return
        user.set_pending_reset(PendingReset(token_hash=token_hash, expires_at=expires_at))
        self.session.add(user)
        await self.session.flush()

    @translate_errors
    async def clear_reset_token(self, user_id: UUID) -> None:
        user = await self._get_for_write(user_id)
        if user is None:
            return
        user.clear_pending_reset()
        self.session.add(user)
        await self.session.flush()

    @translate_errors
    async def get_by_valid_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        stmt = select(User).where(
            User.password_reset_token_hash == token_hash,
            User.password_reset_token_exp > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    @translate_errors
    async def delete(self, user_id: UUID) -> bool:
        user = await self.session.get(User, user_id)
        if user is None:
            return False
        await self.session.delete(user)
        await self.session.flush()
        return True
