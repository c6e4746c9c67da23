"""
User Use Case DTOs

Profile payloads use camelCase on the wire (firstName, lastName, ...) and
accept snake_case on input as well.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.libs.camel import CamelModel


class UpdateProfileCommand(CamelModel):
    """Partial profile update; None means leave unchanged"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    email: Optional[str] = None


class ProfileResponse(CamelModel):
    """User profile without password or reset state"""

    id: str
    first_name: str
    last_name: str
    age: int
    email: str
    created_at: datetime
    updated_at: datetime


class DeleteAccountResponse(BaseModel):
    status: str
    message: str


class ChangePasswordResponse(BaseModel):
    status: str
    message: str
