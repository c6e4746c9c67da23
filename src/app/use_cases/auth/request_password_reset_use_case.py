"""
Request Password Reset Use Case

Issues a reset token for a known email and mails the reset link.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from src.app.repositories.errors import StoreUnavailableError
from src.app.services.mail_sender import IMailSender
from src.app.services.reset_token_service import ResetTokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import STORE_UNAVAILABLE, is_blank
from src.libs.result import Error, Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

EMAIL_REQUIRED = Error("EMAIL_REQUIRED", "Email is required")
MAIL_DELIVERY_FAILED = Error(
    "MAIL_DELIVERY_FAILED", "The password reset email could not be sent"
)

NEUTRAL_MESSAGE = "If the email exists, a password reset link has been sent"

PASSWORD_RESET_SUBJECT = "Reset your password"

PASSWORD_RESET_HTML = """<p>You requested a password reset for your Videoteca account.</p>
<p>This link is valid for {ttl_minutes} minutes:</p>
<p><a href="{reset_link}">{reset_link}</a></p>
<p>If you didn't request this, you can safely ignore this email.</p>"""


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Generate a 32-byte cryptographically secure token (hex)
    - Only the SHA-256 hash and expiry are stored; a new request overwrites
      any earlier token, so only the latest link works
    - Token expires in 1 hour
    - No email enumeration (same response for valid/invalid emails)
    - A delivery failure is reported as MAIL_DELIVERY_FAILED; the token is
      already stored and a retry simply replaces it
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: ResetTokenService,
        mail_sender: IMailSender,
        client_url: str,
    ):
        self.uow = uow
        self.token_service = token_service
        self.mail_sender = mail_sender
        self.client_url = client_url.rstrip("/")

    def _neutral_response(self) -> RequestPasswordResetResponse:
        return RequestPasswordResetResponse(status="sent", message=NEUTRAL_MESSAGE)

    def build_reset_link(self, raw_token: str) -> str:
        return f"{self.client_url}/reset?{urlencode({'token': raw_token})}"

    def _compose(self, raw_token: str) -> str:
        ttl_minutes = int(self.token_service.ttl.total_seconds() // 60)
        return PASSWORD_RESET_HTML.format(
            reset_link=self.build_reset_link(raw_token), ttl_minutes=ttl_minutes
        )

    async def execute(self, email: Optional[str]) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with the neutral reset status, or Error

        Note:
            For security (no email enumeration), always returns the same
            success payload whether or not the email exists. An unknown email
            still gets a token issued and an email composed, which are then
            discarded; only the store write and the SMTP round trip are
            skipped, so their latency remains observable.
        """
        if is_blank(email):
            return Return.err(EMAIL_REQUIRED)

        issued = self.token_service.issue()
        html_body = self._compose(issued.raw_token)

        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(email)

                if user is None:
                    return Return.ok(self._neutral_response())

                user_id, user_email = user.id, user.email
                await self.uow.users.set_reset_token(
                    user_id, issued.token_hash, issued.expires_at
                )
                await self.uow.commit()
        except StoreUnavailableError:
            return Return.err(STORE_UNAVAILABLE)

        logger.info("Password reset token issued for user %s", user_id)

        sent = await self.mail_sender.send(user_email, PASSWORD_RESET_SUBJECT, html_body)
        if sent.is_err():
            logger.error(
                "Password reset email for user %s not delivered: %s",
                user_id,
                sent.error.message,
            )
            return Return.err(MAIL_DELIVERY_FAILED)

        return Return.ok(self._neutral_response())
