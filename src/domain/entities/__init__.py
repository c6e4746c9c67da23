"""
Domain Entities
"""

from .user import PendingReset, User

__all__ = [
    "PendingReset",
    "User",
]
