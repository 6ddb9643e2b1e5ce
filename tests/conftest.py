"""
Pytest configuration and fixtures.

Each test gets its own SQLite file. Tables are created and seeded through a
synchronous engine; the code under test talks to the same file through
aiosqlite. NullPool keeps async connections bound to whichever event loop
opens them, so the same factory works for pytest-asyncio tests and for the
TestClient's loop.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, pool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Profile
from app.ws import manager
from helpers import add_profile


@pytest.fixture
def db_file(tmp_path) -> str:
    return str(tmp_path / "crewnet_test.db")


@pytest.fixture
def sync_engine(db_file):
    engine = create_engine(f"sqlite:///{db_file}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seed(sync_engine) -> Generator[Session, None, None]:
    """Synchronous session for arranging test data."""
    with Session(sync_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def session_factory(sync_engine, db_file):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=pool.NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as test_client:
        yield test_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_connection_manager():
    yield
    manager.active_connections.clear()


@pytest.fixture
def alice(seed) -> Profile:
    return add_profile(seed, "alice", "Alice Director")


@pytest.fixture
def bob(seed) -> Profile:
    return add_profile(seed, "bob", "Bob Gaffer")


@pytest.fixture
def carol(seed) -> Profile:
    return add_profile(seed, "carol", "Carol Editor")
