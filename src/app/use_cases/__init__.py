"""
Use Cases

Organized into domain folders:
- auth/: Registration, login and password recovery
- users/: Profile and password management
"""

from .auth import (
    RegisterUseCase,
    LoginUseCase,
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
)
from .users import (
    GetProfileUseCase,
    UpdateProfileUseCase,
    DeleteAccountUseCase,
    ChangePasswordUseCase,
)

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # Users
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    "DeleteAccountUseCase",
    "ChangePasswordUseCase",
]
