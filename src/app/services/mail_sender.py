from abc import ABC, abstractmethod

from src.libs.result import Result


class IMailSender(ABC):
    """Outbound mail collaborator - application layer"""

    @abstractmethod
    async def send(self, to: str, subject: str, html_body: str) -> Result[None]:
        """Deliver one HTML email; Error(MAIL_DELIVERY_FAILED) when delivery fails"""
        pass
