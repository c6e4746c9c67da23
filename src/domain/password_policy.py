"""
Password Policy

Strength rules applied whenever a password is set (registration, reset,
change). Never applied at login: a password accepted under an older policy
must keep working.
"""

import re
from enum import Enum
from typing import Any, Optional

from src.libs.result import Error, Result, Return

MIN_LENGTH = 8
MAX_BYTES = 72

COMMON_PASSWORDS = frozenset(
    {
        "123456",
        "password",
        "qwerty",
        "abc123",
        "12345678",
        "123456789",
        "111111",
        "password1",
        "123123",
        "contraseña",
    }
)

SYMBOLS = "!@#$%^&*()_+-={}[]|;:\"<>,.?/~`"

_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile("[" + re.escape(SYMBOLS) + "]")


class PasswordViolation(str, Enum):
    """Which rule a candidate password failed"""

    required = "PASSWORD_REQUIRED"
    too_short = "PASSWORD_TOO_SHORT"
    too_long = "PASSWORD_TOO_LONG"
    too_common = "PASSWORD_TOO_COMMON"
    too_weak = "PASSWORD_TOO_WEAK"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    PasswordViolation.required: "Password is required",
    PasswordViolation.too_short: f"Password must be at least {MIN_LENGTH} characters long",
    PasswordViolation.too_long: f"Password must be at most {MAX_BYTES} bytes long",
    PasswordViolation.too_common: "Password is too common, choose another one",
    PasswordViolation.too_weak: (
        "Password must include at least one uppercase letter, one number and one symbol"
    ),
}


def encode_password(candidate: str) -> bytes:
    """UTF-8 bytes of a password; lone surrogates (legal JSON escapes) are kept, not rejected"""
    return candidate.encode("utf-8", "surrogatepass")


def evaluate(candidate: Any) -> Optional[PasswordViolation]:
    """
    Check a candidate password against the policy.

    Rules run in order and the first failure wins.

    Returns:
        The violated rule, or None if the password is acceptable
    """
    if not candidate or not isinstance(candidate, str):
        return PasswordViolation.required

    if len(candidate) < MIN_LENGTH:
        return PasswordViolation.too_short

    if len(encode_password(candidate)) > MAX_BYTES:
        return PasswordViolation.too_long

    if candidate.lower() in COMMON_PASSWORDS:
        return PasswordViolation.too_common

    if not (
        _UPPERCASE.search(candidate)
        and _DIGIT.search(candidate)
        and _SYMBOL.search(candidate)
    ):
        return PasswordViolation.too_weak

    return None


def check_password(candidate: Any) -> Result[None]:
    """evaluate() as a Result, for use cases"""
    violation = evaluate(candidate)
    if violation is not None:
        return Return.err(Error(violation.value, violation.message))
    return Return.ok(None)
