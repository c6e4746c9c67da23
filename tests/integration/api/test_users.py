import pytest
from httpx import AsyncClient

from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/users/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_rejects_invalid_token(client: AsyncClient):
    response = await client.get(
        "/api/users/me", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_me(client: AsyncClient, auth_headers):
    response = await client.get("/api/users/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert exclude_keys(data, {"id", "createdAt", "updatedAt"}) == {
        "firstName": "A",
        "lastName": "B",
        "age": 20,
        "email": "a@x.com",
    }


@pytest.mark.asyncio
async def test_update_me(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/users/me", headers=auth_headers, json={"firstName": "Ana", "age": 21}
    )

    assert response.status_code == 200
    assert response.json()["firstName"] == "Ana"
    assert response.json()["lastName"] == "B"

    again = await client.get("/api/users/me", headers=auth_headers)
    assert again.json()["age"] == 21


@pytest.mark.asyncio
async def test_update_me_email_taken(client: AsyncClient, auth_headers, test_data):
    other = test_data.get_copy("other_user")
    assert (await client.post("/api/auth/signup", json=other)).status_code == 201

    response = await client.put(
        "/api/users/me", headers=auth_headers, json={"email": other["email"]}
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_update_me_underage(client: AsyncClient, auth_headers):
    response = await client.put("/api/users/me", headers=auth_headers, json={"age": 15})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "UNDERAGE"


@pytest.mark.asyncio
async def test_update_me_age_out_of_range(client: AsyncClient, auth_headers):
    response = await client.put("/api/users/me", headers=auth_headers, json={"age": 10**20})

    assert response.status_code == 422

    profile = await client.get("/api/users/me", headers=auth_headers)
    assert profile.json()["age"] == 20


@pytest.mark.asyncio
@pytest.mark.parametrize("path,method", [("/api/users/password", "put"), ("/api/users/change-password", "post")])
async def test_change_password(client: AsyncClient, auth_headers, registered_user, path, method):
    response = await getattr(client, method)(
        path,
        headers=auth_headers,
        json={
            "currentPassword": registered_user["password"],
            "newPassword": "Xyz98765!",
            "confirmPassword": "Xyz98765!",
        },
    )

    assert response.status_code == 200
    login = await client.post(
        "/api/auth/login", json={"email": registered_user["email"], "password": "Xyz98765!"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/users/password",
        headers=auth_headers,
        json={
            "currentPassword": "Wrong1234!",
            "newPassword": "Xyz98765!",
            "confirmPassword": "Xyz98765!",
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CURRENT_PASSWORD_INCORRECT"


@pytest.mark.asyncio
async def test_delete_me(client: AsyncClient, auth_headers, registered_user):
    response = await client.delete("/api/users/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "deleted"

    # Token is still well-formed but the account is gone
    assert (await client.get("/api/users/me", headers=auth_headers)).status_code == 404
    login = await client.post(
        "/api/auth/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert login.status_code == 401
