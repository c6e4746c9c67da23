from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.user_repository import UserRepository
from src.app.repositories.errors import DuplicateEmailError, StoreUnavailableError
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.users = UserRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateEmailError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    async def rollback(self):
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc
