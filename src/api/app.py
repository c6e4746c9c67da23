import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.smtp_mail_sender import SmtpMailSender
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_service import ResetTokenService
from src.app.services.session_issuer import SessionIssuer
from src.domain import entities  # noqa: F401  registers tables on SQLModel.metadata
from .error import ClientError, ServerError
from .middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.config.DB_AUTO_CREATE:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    yield
    await app.state.engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Videoteca API", version="0.1.0", lifespan=lifespan)

    # Collaborators are built once here and shared read-only by every request
    engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
    app.state.config = ApplicationConfig
    app.state.engine = engine
    app.state.session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    app.state.password_hasher = PasswordHasher(rounds=ApplicationConfig.PASSWORD_HASH_ROUNDS)
    app.state.reset_token_service = ResetTokenService(
        ttl=timedelta(minutes=ApplicationConfig.RESET_TOKEN_TTL_MINUTES)
    )
    app.state.session_issuer = SessionIssuer(
        ApplicationConfig.JWT_SECRET,
        algorithm=ApplicationConfig.JWT_ALGORITHM,
        ttl=timedelta(days=ApplicationConfig.SESSION_TTL_DAYS),
    )
    app.state.mail_sender = SmtpMailSender(ApplicationConfig)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    from src.api.routes import auth, health_check, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=ApplicationConfig.API_PREFIX, tags=["Authentication"])
    app.include_router(user.router, prefix=ApplicationConfig.API_PREFIX, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
