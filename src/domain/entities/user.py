"""
User Entity

The credential record: login identity, password hash, pending reset state
and profile attributes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


@dataclass(frozen=True)
class PendingReset:
    """An outstanding password reset: SHA-256 of the raw token plus its expiry."""

    token_hash: str
    expires_at: datetime


class User(SQLModel, table=True):
    """
    User entity - one record per registered account.

    Business Rules:
    - Email is unique and stored lower-cased
    - Password stored as bcrypt hash (cost factor 10), never plaintext
    - Reset token hash and expiry are set and cleared together; read and
      write them through ``pending_reset`` / ``set_pending_reset`` /
      ``clear_pending_reset`` only
    - Minimum age 18
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    age: int

    password_reset_token_hash: Optional[str] = Field(
        default=None, index=True, max_length=64
    )
    password_reset_token_exp: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    @property
    def pending_reset(self) -> Optional[PendingReset]:
        if self.password_reset_token_hash is None or self.password_reset_token_exp is None:
            return None
        return PendingReset(
            token_hash=self.password_reset_token_hash,
            expires_at=self.password_reset_token_exp,
        )

    def set_pending_reset(self, pending: PendingReset) -> None:
        self.password_reset_token_hash = pending.token_hash
        self.password_reset_token_exp = pending.expires_at

    def clear_pending_reset(self) -> None:
        self.password_reset_token_hash = None
        self.password_reset_token_exp = None

    def touch(self) -> None:
        self.updated_at = utcnow()
