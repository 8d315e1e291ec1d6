"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  PostGIS-specific features (Geometry columns) are
mocked by using plain String columns in the test models, and the route
modules' repositories are swapped for subclasses bound to those models.
"""

from contextlib import contextmanager
from typing import AsyncGenerator
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.pool import StaticPool

from src.api.middleware import limiter
from src.config import Settings
from src.infrastructure.database import Database
from src.infrastructure.repositories import StationRepository, UserRepository


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class TestBase(DeclarativeBase):
    pass


# Mirror the production models but without PostGIS Geometry columns
# (SQLite doesn't support them).

class TestUserModel(TestBase):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class TestStationModel(TestBase):
    __tablename__ = "charging_stations"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    location = Column(String, nullable=True)  # stub for Geometry
    address = Column(String(500), nullable=True)
    connector_type = Column(String(20), nullable=True)
    power_output = Column(Integer, nullable=True)
    status = Column(String(20), default="available", nullable=False)
    price_per_kwh = Column(Float, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    creator = relationship(TestUserModel, lazy="joined")


class SQLiteUserRepository(UserRepository):
    model = TestUserModel


class SQLiteStationRepository(StationRepository):
    model = TestStationModel

    @staticmethod
    def _make_point(latitude, longitude):
        return f"POINT({longitude} {latitude})"


def make_test_database() -> Database:
    # one shared connection, otherwise each checkout gets a fresh empty DB
    return Database(TEST_DB_URL, metadata=TestBase.metadata, poolclass=StaticPool)


@contextmanager
def sqlite_repositories():
    """Point every module that builds a repository at the SQLite models."""
    with (
        patch("src.api.dependencies.UserRepository", SQLiteUserRepository),
        patch("src.api.routes.auth.UserRepository", SQLiteUserRepository),
        patch("src.api.routes.stations.StationRepository", SQLiteStationRepository),
        patch("src.api.routes.system.UserRepository", SQLiteUserRepository),
        patch("src.api.routes.system.StationRepository", SQLiteStationRepository),
    ):
        yield


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DB_URL,
        jwt_secret="test-secret",
        bcrypt_rounds=4,  # bcrypt minimum, keeps tests fast
    )


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create tables, yield the database, then drop everything."""
    db = make_test_database()
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database):
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(settings: Settings, database: Database):
    """AsyncClient backed by SQLite + test models."""
    with sqlite_repositories():
        from src.api.app import create_app

        app = create_app(settings, database)
        limiter.reset()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


async def register(client: AsyncClient, username="alice", email="alice@example.com",
                   password="secret123"):
    return await client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "password": password},
    )


@pytest_asyncio.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    resp = await register(client)
    return {"Authorization": f"Bearer {resp.json()['token']}"}
