"""
FastAPI dependencies.

Long-lived collaborators (session factory, hasher, token services, mail
sender) are built once by create_app and kept on app.state; these
dependencies only hand them out.
"""

from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.mail_sender import IMailSender
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_service import ResetTokenService
from src.app.services.session_issuer import SessionIssuer

security = HTTPBearer(auto_error=False)


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_reset_token_service(request: Request) -> ResetTokenService:
    return request.app.state.reset_token_service


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_mail_sender(request: Request) -> IMailSender:
    return request.app.state.mail_sender


def get_client_url(request: Request) -> str:
    return request.app.state.config.CLIENT_URL


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session_issuer: SessionIssuer = Depends(get_session_issuer),
) -> UUID:
    """
    Dependency to extract and verify the session token from the Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        The authenticated user's id

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = session_issuer.verify(credentials.credentials)

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return UUID(user_id)
