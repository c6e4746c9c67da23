import logging
import re
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from fastapi.concurrency import run_in_threadpool

from src.app.services.mail_sender import IMailSender
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]+>")


class SmtpMailSender(IMailSender):
    """SMTP implementation of the mail collaborator, configured once at startup"""

    def __init__(self, config):
        self._config = config

    def _create_message(self, to: str, subject: str, html_body: str) -> MIMEMultipart:
        sender = self._config.EMAIL_FROM
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._config.EMAIL_FROM_NAME} <{sender}>"
        msg["To"] = to
        msg["Reply-To"] = self._config.REPLY_TO or sender

        msg.attach(MIMEText(_TAG.sub("", html_body), "plain"))
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _deliver(self, message: MIMEMultipart) -> None:
        host = self._config.SMTP_HOST
        port = self._config.SMTP_PORT
        user = self._config.SMTP_USER
        password = self._config.SMTP_PASSWORD or ""

        if self._config.SMTP_USE_TLS and not self._config.SMTP_STARTTLS:
            # Implicit TLS (port 465)
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(host, port, context=context) as server:
                if user:
                    server.login(user, password)
                server.send_message(message)
        else:
            # STARTTLS (port 587) or plain
            with smtplib.SMTP(host, port) as server:
                if self._config.SMTP_STARTTLS:
                    server.starttls(context=ssl.create_default_context())
                if user:
                    server.login(user, password)
                server.send_message(message)

    async def send(self, to: str, subject: str, html_body: str) -> Result[None]:
        if not self._config.SMTP_ENABLED:
            logger.warning("SMTP disabled, email '%s' to %s not sent", subject, to)
            logger.debug("Undelivered email body: %s", html_body)
            return Return.ok(None)

        if not self._config.SMTP_HOST:
            logger.error("SMTP host not configured")
            return Return.err(
                Error("MAIL_DELIVERY_FAILED", "Mail server is not configured")
            )

        message = self._create_message(to, subject, html_body)
        try:
            await run_in_threadpool(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            return Return.err(Error("MAIL_DELIVERY_FAILED", "Email could not be delivered"))

        logger.info("Email sent to %s", to)
        return Return.ok(None)
