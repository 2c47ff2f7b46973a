import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.depends import get_unit_of_work
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import User


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
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
async def client(db_session, hasher):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(
        ApplicationConfig,
        uow_factory=lambda: SqlAlchemyUnitOfWork(db_session),
        password_hasher=hasher,
    )

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await app.state.session_registry.close()


@pytest_asyncio.fixture
async def seed_user(db_session, hasher, test_data):
    """Insert an account from test_data.json; returns plain values, not the ORM object"""

    async def _seed(key: str, **overrides) -> dict:
        data = test_data.account(key)
        data.update(overrides)
        password = data.pop("password")
        user = User(password_hash=hasher.hash(password), **data)
        db_session.add(user)
        await db_session.commit()
        return {"id": str(user.id), "username": user.username, "password": password}

    return _seed


@pytest_asyncio.fixture
async def login_as(client):
    """Log in and return the Authorization header for the new session"""

    async def _login(account: dict) -> dict:
        response = await client.post(
            "/auth/login",
            json={"username": account["username"], "password": account["password"]},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
