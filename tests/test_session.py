"""
Tests for database lifecycle and settings
"""

import pytest
from sqlmodel import select

from repotalk_db.config import Settings, get_settings
from repotalk_db.database import session as session_module
from repotalk_db.database.models import User
from repotalk_db.database.session import Database, close_database, get_database


class TestDatabase:
    """Tests for the Database handle"""

    async def test_session_commits_on_success(self, database):
        async with database.session() as session:
            session.add(User(name="Committed"))

        async with database.session() as session:
            result = await session.execute(select(User).where(User.name == "Committed"))
            assert result.scalar_one_or_none() is not None

    async def test_session_rolls_back_on_error(self, database):
        with pytest.raises(RuntimeError):
            async with database.session() as session:
                session.add(User(name="Rolled back"))
                await session.flush()
                raise RuntimeError("boom")

        async with database.session() as session:
            result = await session.execute(select(User).where(User.name == "Rolled back"))
            assert result.scalar_one_or_none() is None

    async def test_init_schema_is_repeatable(self, database):
        await database.init_schema()

    async def test_sqlite_is_not_postgres(self, database):
        assert database.is_postgres is False

    async def test_async_context_disposes(self, database_url):
        async with Database(database_url) as db:
            await db.init_schema()
            async with db.session() as session:
                session.add(User(name="Scoped"))

    async def test_pool_options_ignored_for_sqlite(self, database_url):
        db = Database(database_url, pool_size=5, max_overflow=10)
        await db.init_schema()
        await db.dispose()


class TestProcessDatabase:
    """Tests for the lazily created process-wide database"""

    async def test_get_database_is_cached_until_closed(self, monkeypatch, database_url):
        monkeypatch.setenv("DATABASE_URL", database_url)
        monkeypatch.setattr(session_module, "_database", None)

        first = get_database()
        assert get_database() is first
        assert first.url == database_url

        await close_database()
        assert session_module._database is None

    async def test_close_without_database_is_noop(self, monkeypatch):
        monkeypatch.setattr(session_module, "_database", None)

        await close_database()


class TestSettings:
    """Tests for settings"""

    def test_echo_follows_environment(self):
        assert Settings(environment="development", database_echo=None).sql_echo is True
        assert Settings(environment="production", database_echo=None).sql_echo is False

    def test_explicit_echo_wins(self):
        assert Settings(environment="development", database_echo=False).sql_echo is False
        assert Settings(environment="staging", database_echo=True).sql_echo is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u:p@db:5432/x")
        monkeypatch.setenv("DATABASE_POOL_SIZE", "12")

        settings = get_settings()

        assert settings.database_url == "postgresql+psycopg://u:p@db:5432/x"
        assert settings.database_pool_size == 12

    def test_from_settings_uses_echo(self, database_url):
        settings = Settings(database_url=database_url, environment="production", database_echo=None)

        db = Database.from_settings(settings)

        assert db.engine.sync_engine.echo is False
