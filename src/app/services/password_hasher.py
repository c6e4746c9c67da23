import bcrypt

from src.domain.password_policy import MAX_BYTES, encode_password

# bcrypt only considers the first 72 bytes of its input; longer secrets are
# refused here and by the password policy instead of being truncated
BCRYPT_MAX_BYTES = MAX_BYTES


class PasswordHasher:
    """
    bcrypt password hashing with a fixed cost factor.

    hash() salts randomly, so two calls with the same password give
    different digests; verify() accepts any digest hash() produced and
    returns False (never raises) for malformed or over-long input.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_hash = self.hash("dummy-password-for-timing")

    def hash(self, plaintext: str) -> str:
        secret = encode_password(plaintext)
        if len(secret) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
        digest = bcrypt.hashpw(secret, bcrypt.gensalt(self.rounds))
        return digest.decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        if not isinstance(plaintext, str) or not isinstance(digest, str):
            return False
        secret = encode_password(plaintext)
        if len(secret) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(secret, digest.encode("utf-8"))
        except ValueError:
            return False

    def dummy_verify(self) -> None:
        """Spend one verification so unknown-user logins take as long as real ones"""
        self.verify("dummy-password-for-timing-mismatch", self._dummy_hash)
