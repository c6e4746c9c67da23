import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_mail_sender, get_unit_of_work
from src.domain import entities  # noqa: F401
from tests.fixtures.in_memory_store import RecordingMailSender
from tests.fixtures.json_loader import TestDataLoader


class TestConfig(ApplicationConfig):
    DB_URI = "sqlite+aiosqlite:///:memory:"
    DB_AUTO_CREATE = False
    ENABLE_LOGGING_MIDDLEWARE = False
    PASSWORD_HASH_ROUNDS = 4
    JWT_SECRET = "integration-test-secret"
    CLIENT_URL = "http://localhost:5173"
    SMTP_ENABLED = False


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
def mail_sender():
    return RecordingMailSender()


@pytest_asyncio.fixture
async def app(session_factory, mail_sender):
    from src.api.app import create_app

    app = create_app(TestConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def registered_user(client, test_data):
    payload = test_data.get_copy("register")
    response = await client.post("/api/auth/signup", json=payload)
    assert response.status_code == 201
    return payload


@pytest_asyncio.fixture
async def auth_headers(client, registered_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
