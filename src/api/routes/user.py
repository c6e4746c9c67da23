from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field

from src.api.error import ClientError, raise_for_dependency_failure
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    DeleteAccountResponse,
    DeleteAccountUseCase,
    GetProfileUseCase,
    ProfileResponse,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from src.depends import get_current_user, get_password_hasher, get_unit_of_work
from src.libs.camel import CamelModel

router = APIRouter(prefix="/users", tags=["User"])


def raise_for_error(error) -> None:
    if error.code == "USER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    elif error.code == "EMAIL_ALREADY_EXISTS":
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    elif error.code in (
        "MISSING_FIELDS",
        "UNDERAGE",
        "PASSWORD_MISMATCH",
        "CURRENT_PASSWORD_INCORRECT",
    ) or error.code.startswith("PASSWORD_"):
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise_for_dependency_failure(error)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=ProfileResponse)
async def get_me(
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User Profile

    Raises:
        - 401 Unauthorized: Missing, invalid or expired session token
        - 404 Not Found: Account no longer exists
    """
    result = await GetProfileUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class UpdateProfileRequest(CamelModel):
    """Profile update payload; omitted fields are left unchanged"""

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=150)
    email: Optional[EmailStr] = None


@router.put("/me", status_code=status.HTTP_200_OK, response_model=ProfileResponse)
async def update_me(
    request: UpdateProfileRequest,
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Current User Profile

    Raises:
        - 400 Bad Request: Blank field or underage
        - 401 Unauthorized: Missing, invalid or expired session token
        - 404 Not Found: Account no longer exists
        - 409 Conflict: Email belongs to another account
    """
    command = UpdateProfileCommand(
        first_name=request.first_name,
        last_name=request.last_name,
        age=request.age,
        email=request.email,
    )
    result = await UpdateProfileUseCase(uow).execute(user_id, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete("/me", status_code=status.HTTP_200_OK, response_model=DeleteAccountResponse)
async def delete_me(
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Current User Account

    Irreversible.
    """
    result = await DeleteAccountUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None


@router.put("/password", status_code=status.HTTP_200_OK, response_model=ChangePasswordResponse)
@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ChangePasswordResponse,
)
async def change_password(
    request: ChangePasswordRequest,
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Change Password

    Requires the current password; invalidates any pending password reset.

    Raises:
        - 400 Bad Request: Missing fields, mismatch, weak password, or wrong
          current password
        - 401 Unauthorized: Missing, invalid or expired session token
        - 404 Not Found: Account no longer exists
    """
    use_case = ChangePasswordUseCase(uow, hasher)
    result = await use_case.execute(
        user_id,
        request.current_password,
        request.new_password,
        request.confirm_password,
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
