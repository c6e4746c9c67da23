import pytest
from httpx import AsyncClient
from sqlmodel import func, select

from src.domain.entities import User


@pytest.mark.asyncio
async def test_register_login_forgot_reset(client: AsyncClient, test_data, mail_sender, db_session):
    """
    Register, log in, fail with a wrong password, request a reset, complete it,
    then only the new password works.
    """
    payload = test_data.get_copy("register")
    new_password = test_data.get("new_password")

    signup = await client.post("/api/auth/signup", json=payload)
    assert signup.status_code == 201
    assert set(signup.json()) == {"id", "email"}

    login = await client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "Abc12345!"}
    )
    assert login.status_code == 200
    assert login.json()["token"]

    wrong = await client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "Nope1234!"}
    )
    assert wrong.status_code == 401

    forgot = await client.post("/api/auth/forgot", json={"email": "a@x.com"})
    assert forgot.status_code == 200
    assert forgot.json()["status"] == "sent"

    pending = await db_session.exec(
        select(func.count()).select_from(User).where(User.password_reset_token_hash.is_not(None))
    )
    assert pending.one() == 1

    reset = await client.post(
        "/api/auth/reset",
        json={
            "token": mail_sender.last_reset_token(),
            "newPassword": new_password,
            "confirmPassword": new_password,
        },
    )
    assert reset.status_code == 200

    old = await client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "Abc12345!"}
    )
    new = await client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": new_password}
    )
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_duplicate_registration_keeps_first_record(
    client: AsyncClient, test_data, session_factory
):
    first = test_data.get_copy("register")
    second = test_data.get_copy("other_user")
    second["email"] = first["email"]

    assert (await client.post("/api/auth/signup", json=first)).status_code == 201
    assert (await client.post("/api/auth/signup", json=second)).status_code == 409

    async with session_factory() as session:
        users = (await session.exec(select(User))).all()
    assert len(users) == 1
    assert users[0].first_name == "A"
