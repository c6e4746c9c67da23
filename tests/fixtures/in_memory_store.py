"""
In-memory credential store and mail doubles.

Behave like the SQL adapter (lower-cased unique emails, per-record writes,
commit/rollback) so use cases can be chained end to end without a database.
"""

import re
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.app.repositories.errors import DuplicateEmailError
from src.app.repositories.user_repository import IUserRepository
from src.app.services.mail_sender import IMailSender
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PendingReset, User
from src.libs.result import Error, Result, Return

RESET_TOKEN_IN_LINK = re.compile(r"token=([0-9a-f]{64})")


class InMemoryUserRepository(IUserRepository):
    def __init__(self, rows: Dict[UUID, User]):
        self.rows = rows

    async def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        for user in self.rows.values():
            if user.email == email:
                return user
        return None

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self.rows.get(user_id)

    async def create(self, user: User) -> User:
        user.email = user.email.strip().lower()
        if await self.get_by_email(user.email) is not None:
            raise DuplicateEmailError(user.email)
        self.rows[user.id] = user
        return user

    async def update(self, user: User) -> User:
        user.email = user.email.strip().lower()
        user.touch()
        self.rows[user.id] = user
        return user

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        user = self.rows.get(user_id)
        if user is not None:
            user.password_hash = password_hash
            user.touch()

    async def set_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> None:
        user = self.rows.get(user_id)
        if user is not None:
            user.set_pending_reset(PendingReset(token_hash=token_hash, expires_at=expires_at))

    async def clear_reset_token(self, user_id: UUID) -> None:
        user = self.rows.get(user_id)
        if user is not None:
            user.clear_pending_reset()

    async def get_by_valid_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        for user in self.rows.values():
            pending = user.pending_reset
            if pending and pending.token_hash == token_hash and pending.expires_at > now:
                return user
        return None

    async def delete(self, user_id: UUID) -> bool:
        return self.rows.pop(user_id, None) is not None


def _snapshot(rows: Dict[UUID, User]) -> Dict[UUID, dict]:
    return {user_id: user.model_dump() for user_id, user in rows.items()}


def _restore(snapshot: Dict[UUID, dict]) -> Dict[UUID, User]:
    return {user_id: User(**data) for user_id, data in snapshot.items()}


class InMemoryUnitOfWork(UnitOfWork):
    """Works on a copy of the committed rows; commit publishes it"""

    def __init__(self):
        self.committed: Dict[UUID, dict] = {}
        self.commits = 0

    async def __aenter__(self):
        self.users = InMemoryUserRepository(_restore(self.committed))
        return self

    async def __aexit__(self, *args):
        await self.rollback()
        return False

    async def commit(self):
        self.committed = _snapshot(self.users.rows)
        self.commits += 1

    async def rollback(self):
        self.users = InMemoryUserRepository(_restore(self.committed))

    def stored(self, email: str) -> Optional[User]:
        for data in self.committed.values():
            if data["email"] == email.lower():
                return User(**data)
        return None


class RecordingMailSender(IMailSender):
    def __init__(self):
        self.sent: List[dict] = []

    async def send(self, to: str, subject: str, html_body: str) -> Result[None]:
        self.sent.append({"to": to, "subject": subject, "html_body": html_body})
        return Return.ok(None)

    def last_reset_token(self) -> Optional[str]:
        if not self.sent:
            return None
        match = RESET_TOKEN_IN_LINK.search(self.sent[-1]["html_body"])
        return match.group(1) if match else None


class FailingMailSender(IMailSender):
    def __init__(self):
        self.attempts = 0

    async def send(self, to: str, subject: str, html_body: str) -> Result[None]:
        self.attempts += 1
        return Return.err(Error("MAIL_DELIVERY_FAILED", "SMTP connection refused"))
