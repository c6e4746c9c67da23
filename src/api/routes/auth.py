from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field, field_validator

from src.api.error import ClientError, raise_for_dependency_failure
from src.app.services.mail_sender import IMailSender
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_service import ResetTokenService
from src.app.services.session_issuer import SessionIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    LoginUseCase,
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
    LoginResponse,
    RequestPasswordResetResponse,
    ConfirmPasswordResetResponse,
)
from src.depends import (
    get_client_url,
    get_mail_sender,
    get_password_hasher,
    get_reset_token_service,
    get_session_issuer,
    get_unit_of_work,
)
from src.libs.camel import CamelModel

router = APIRouter(prefix="/auth", tags=["Authentication"])

VALIDATION_CODES = {
    "MISSING_FIELDS",
    "UNDERAGE",
    "EMAIL_REQUIRED",
    "PASSWORD_MISMATCH",
    "INVALID_OR_EXPIRED_TOKEN",
}


def is_client_validation_error(code: str) -> bool:
    return code in VALIDATION_CODES or code.startswith("PASSWORD_")


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Fields are optional at the HTTP level so that a missing field is reported
    as MISSING_FIELDS by the use case rather than as a schema error.
    """

    first_name: Optional[str] = Field(None, max_length=100, description="First name")
    last_name: Optional[str] = Field(None, max_length=100, description="Last name")
    age: Optional[int] = Field(None, ge=0, le=150, description="Age in years (18 or older)")
    email: Optional[EmailStr] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="Password meeting the password policy")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        return None if isinstance(value, str) and not value.strip() else value


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def signup(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    User Registration

    Creates a new account. No session token is issued; the client logs in
    afterwards.

    Raises:
        - 400 Bad Request: Missing fields, underage, or weak password
        - 422 Unprocessable Entity: Age outside 0-150 or malformed email
        - 409 Conflict: Email already exists
        - 503 Service Unavailable: Store unreachable
    """
    command = RegisterCommand(
        first_name=request.first_name,
        last_name=request.last_name,
        age=request.age,
        email=request.email,
        password=request.password,
    )

    use_case = RegisterUseCase(uow, hasher)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif is_client_validation_error(error.code):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise_for_dependency_failure(error)

    return result.value


class LoginRequest(CamelModel):
    """Login HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    session_issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    User Login

    Returns a bearer session token valid for 7 days.

    Raises:
        - 401 Unauthorized: Invalid credentials (same for unknown email and wrong password)
        - 503 Service Unavailable: Store unreachable
    """
    use_case = LoginUseCase(uow, hasher, session_issuer)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise_for_dependency_failure(error)

    return result.value


class ForgotPasswordRequest(CamelModel):
    """Forgot password HTTP request payload"""

    email: Optional[EmailStr] = Field(None, description="User email address")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        return None if isinstance(value, str) and not value.strip() else value


@router.post(
    "/forgot",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: ResetTokenService = Depends(get_reset_token_service),
    mail_sender: IMailSender = Depends(get_mail_sender),
    client_url: str = Depends(get_client_url),
):
    """
    Request Password Reset

    Generates a reset token (SHA-256 hashed at rest, valid 1 hour) and emails
    the reset link.

    Security:
        - No email enumeration (same response for valid/invalid emails)

    Returns:
        - 200 OK: Neutral success
        - 400 Bad Request: Email missing
        - 502 Bad Gateway: Reset email could not be delivered
        - 503 Service Unavailable: Store unreachable
    """
    use_case = RequestPasswordResetUseCase(uow, token_service, mail_sender, client_url)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_REQUIRED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise_for_dependency_failure(error)

    return result.value


class ResetPasswordRequest(CamelModel):
    """Reset password HTTP request payload"""

    token: Optional[str] = Field(None, description="Password reset token from email")
    new_password: Optional[str] = Field(None, description="New password")
    confirm_password: Optional[str] = Field(None, description="New password, repeated")


@router.post(
    "/reset",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: ResetTokenService = Depends(get_reset_token_service),
):
    """
    Confirm Password Reset

    Validates the reset token and replaces the password. The token cannot
    be used again.

    Raises:
        - 400 Bad Request: Missing fields, mismatch, weak password, or
          invalid/expired token
        - 503 Service Unavailable: Store unreachable
    """
    use_case = ConfirmPasswordResetUseCase(uow, hasher, token_service)
    result = await use_case.execute(
        request.token, request.new_password, request.confirm_password
    )

    if result.is_err():
        error = result.error
        if is_client_validation_error(error.code):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise_for_dependency_failure(error)

    return result.value
