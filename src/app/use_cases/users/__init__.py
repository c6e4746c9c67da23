"""
User Use Cases

Profile and password management for the authenticated user.
"""

from .get_profile_use_case import GetProfileUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .delete_account_use_case import DeleteAccountUseCase
from .change_password_use_case import ChangePasswordUseCase
from .dtos import (
    UpdateProfileCommand,
    ProfileResponse,
    DeleteAccountResponse,
    ChangePasswordResponse,
)

__all__ = [
    # Use Cases
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    "DeleteAccountUseCase",
    "ChangePasswordUseCase",
    # DTOs
    "UpdateProfileCommand",
    "ProfileResponse",
    "DeleteAccountResponse",
    "ChangePasswordResponse",
]
