from fastapi import status
from src.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


def raise_for_dependency_failure(error: Error) -> None:
    """Raise ServerError with the status matching a failed store or mail dependency"""
    if error.code == "STORE_UNAVAILABLE":
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    if error.code == "MAIL_DELIVERY_FAILED":
        raise ServerError(error, status_code=status.HTTP_502_BAD_GATEWAY)
    raise ServerError(error)
