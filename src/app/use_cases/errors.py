"""
Errors shared by several use cases.

Codes are stable API surface: routes map them to HTTP statuses and clients
branch on them.
"""

from src.libs.result import Error

MISSING_FIELDS = Error("MISSING_FIELDS", "Missing fields")
UNDERAGE = Error("UNDERAGE", "You must be at least 18 years old")
PASSWORD_MISMATCH = Error("PASSWORD_MISMATCH", "Passwords do not match")
EMAIL_ALREADY_EXISTS = Error("EMAIL_ALREADY_EXISTS", "Email already registered")
USER_NOT_FOUND = Error("USER_NOT_FOUND", "User not found")
STORE_UNAVAILABLE = Error("STORE_UNAVAILABLE", "Storage is temporarily unavailable")

MINIMUM_AGE = 18


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
