"""Test fixtures — a fresh in-memory database per test.

Learn: Each test gets its own sqlite+aiosqlite engine (StaticPool, so the
single in-memory connection is shared) with the schema created from the
ORM metadata and foreign keys switched on. Services commit for real;
the whole database disappears when the engine is disposed.

Environment is set before anything from todoapp is imported, because
the settings singleton and the default app are built at import time.
"""

import os

os.environ["TODOAPP_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["TODOAPP_JWT_SECRET"] = "test-secret-key"
os.environ["TODOAPP_ENVIRONMENT"] = "development"
os.environ["TODOAPP_BCRYPT_ROUNDS"] = "4"
os.environ["TODOAPP_LOG_JSON"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from todoapp.auth.jwt import TokenService
from todoapp.auth.password import hash_password
from todoapp.db.engine import create_schema, get_db
from todoapp.db.models import User
from todoapp.main import app

TEST_SECRET = "test-secret-key"


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture()
def tokens():
    return TokenService(secret=TEST_SECRET)


async def make_user(db: AsyncSession, username: str, password: str = "secret") -> int:
    """Insert a user row directly and return its id."""
    user = User(username=username, name=username.title(), password_hash=hash_password(password, 4))
    db.add(user)
    await db.commit()
    return user.id


@pytest_asyncio.fixture()
async def owner(db_session):
    """Id of the user the `client` fixture is authenticated as."""
    return await make_user(db_session, "owner")


@pytest_asyncio.fixture()
async def stranger(db_session):
    """Id of a second user who owns nothing of `owner`'s."""
    return await make_user(db_session, "stranger")


@pytest_asyncio.fixture()
async def client(db_session, owner):
    """HTTP client with get_db and auth overridden for testing.

    Learn: get_current_user is overridden to return `owner`, so list and
    item tests don't need to sign up and sign in first. Auth tests use
    `unauthenticated_client` to run the real bearer-token pipeline.
    """
    from todoapp.auth.dependencies import CurrentIdentity, get_current_user

    async def override_get_db():
        yield db_session

    def override_get_current_user():
        return CurrentIdentity(user_id=owner)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session):
    """HTTP client WITHOUT auth override — real sign-up/sign-in/bearer flow."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def sign_up_and_in(unauthenticated_client):
    """Register a user through the API; returns bearer headers for it."""

    async def _sign_up_and_in(username: str, password: str = "pass") -> dict:
        r = await unauthenticated_client.post(
            "/auth/sign-up",
            json={"username": username, "name": username.title(), "password": password},
        )
        assert r.status_code == 200, r.text
        r = await unauthenticated_client.post(
            "/auth/sign-in", json={"username": username, "password": password}
        )
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _sign_up_and_in
