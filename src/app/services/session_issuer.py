from datetime import UTC, datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from jose import JWTError, jwt


def _now() -> datetime:
    return datetime.now(UTC)


class SessionIssuer:
    """
    Issues and verifies bearer session tokens (JWT, HS256 by default).

    Sessions are not stored server-side: the token itself carries the user id
    and expiry, so rotating the secret invalidates every outstanding session.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _now,
    ):
        if not secret:
            raise ValueError("Session signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock

    def issue(self, user_id: UUID) -> str:
        """
        Generate a session token

        Args:
            user_id: User UUID

        Returns:
            JWT token string expiring after the configured TTL (7 days)
        """
        now = self.clock()
        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[str]:
        """
        Verify a session token

        Returns:
            The user id, or None for any bad signature, malformed or expired token
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError:
            return None

        user_id = payload.get("user_id")
        if not isinstance(user_id, str) or payload.get("sub") != user_id:
            return None
        try:
            UUID(user_id)
        except ValueError:
            return None
        return user_id
