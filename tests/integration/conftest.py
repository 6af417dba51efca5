import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.bcrypt_hasher import BcryptSecretHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.session_policy import SessionPolicy
from src.depends import (
    get_secret_hasher,
    get_session_policy,
    get_token_notifier,
    get_unit_of_work,
)
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.notifier import RecordingNotifier

TEST_HASHER = BcryptSecretHasher(rounds=4)


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def policy():
    return SessionPolicy(jwt_secret="integration-test-secret")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, policy, notifier, test_data, monkeypatch):
    from src.api.app import create_app

    monkeypatch.setattr(ApplicationConfig, "ADMIN_API_KEY", test_data.get("admin_api_key"))
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_session_policy] = lambda: policy
    app.dependency_overrides[get_secret_hasher] = lambda: TEST_HASHER
    app.dependency_overrides[get_token_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def member_tokens(client, test_data):
    """Join a member and return the authorized response body"""
    response = await client.post("/auth/members/join", json=test_data.get_copy("member"))
    assert response.status_code == 201
    return response.json()
