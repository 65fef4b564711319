"""
Pytest configuration and fixtures
"""

import os

import pytest

# Set test environment variables before importing package modules
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_ECHO", "false")

from repotalk_db.config import get_settings
from repotalk_db.database.models import (
    CodeEmbedding,
    Repository,
    User,
    VapiCall,
    VapiCallStatus,
)
from repotalk_db.database.session import Database


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'repotalk.db'}"


@pytest.fixture
async def database(database_url):
    """SQLite-backed database with all tables created."""
    db = Database(database_url)
    await db.init_schema()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
async def user(session):
    user = User(github_id="gh-1", email="dev@example.com", name="Dev")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def repository(session, user):
    repo = Repository(
        user_id=user.id,
        github_url="https://github.com/acme/widgets.git",
        owner="acme",
        name="widgets",
    )
    session.add(repo)
    await session.commit()
    return repo


@pytest.fixture
async def vapi_call(session, user):
    call = VapiCall(
        vapi_call_id="vapi-call-1",
        user_id=user.id,
        status=VapiCallStatus.IN_PROGRESS,
        duration=120,
        cost=1.5,
    )
    session.add(call)
    await session.commit()
    return call


@pytest.fixture
def make_embedding(session):
    """Factory for embedding rows without vectors."""

    async def _make(repository_id: str, language: str | None, path: str = "src/main"):
        row = CodeEmbedding(
            repository_id=repository_id,
            content=f"// {path}",
            path=path,
            language=language,
        )
        session.add(row)
        await session.commit()
        return row

    return _make
