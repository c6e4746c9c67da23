"""
Reset Token Service

Issues and validates password reset tokens. Only the SHA-256 of a token is
ever stored, so a leaked database row cannot be turned into a working reset
link; the raw token exists only in the email sent to the user.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from src.domain.base import utcnow

TOKEN_BYTES = 32


@dataclass(frozen=True)
class IssuedResetToken:
    raw_token: str
    token_hash: str
    expires_at: datetime


class ResetTokenService:
    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl = ttl
        self.clock = clock

    @staticmethod
    def hash_token(raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode("utf-8", "surrogatepass")).hexdigest()

    def issue(self) -> IssuedResetToken:
        raw_token = secrets.token_hex(TOKEN_BYTES)
        return IssuedResetToken(
            raw_token=raw_token,
            token_hash=self.hash_token(raw_token),
            expires_at=self.clock() + self.ttl,
        )

    def validate(
        self,
        raw_token: str,
        stored_hash: Optional[str],
        stored_expiry: Optional[datetime],
        now: Optional[datetime] = None,
    ) -> bool:
        """True iff raw_token hashes to stored_hash and stored_expiry is still ahead"""
        if not raw_token or not stored_hash or stored_expiry is None:
            return False
        if now is None:
            now = self.clock()
        matches = hmac.compare_digest(
            self.hash_token(raw_token).encode("utf-8"), stored_hash.encode("utf-8")
        )
        return matches and now < stored_expiry
