from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from src.app.repositories.errors import StoreUnavailableError
from src.depends import get_unit_of_work


@pytest.fixture
def broken_store(app):
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.users.get_by_email = AsyncMock(side_effect=StoreUnavailableError("connection refused"))

    app.dependency_overrides[get_unit_of_work] = lambda: uow
    return uow


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path,body",
    [
        ("/api/auth/login", {"email": "a@x.com", "password": "Abc12345!"}),
        ("/api/auth/forgot", {"email": "a@x.com"}),
        (
            "/api/auth/signup",
            {"firstName": "A", "lastName": "B", "age": 20, "email": "a@x.com", "password": "Abc12345!"},
        ),
    ],
)
async def test_store_outage_is_503(client: AsyncClient, broken_store, path, body):
    response = await client.post(path, json=body)

    assert response.status_code == 503
    error = response.json()["error"]
    assert error["code"] == "STORE_UNAVAILABLE"
    assert error["message"] == "Internal server error"
