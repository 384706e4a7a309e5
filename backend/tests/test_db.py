import pytest
from sqlalchemy.pool import NullPool, StaticPool

from clubrank import db


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@db/club", "postgresql+asyncpg://u:p@db/club"),
        ("postgres://u:p@db/club", "postgresql+asyncpg://u:p@db/club"),
        ("sqlite:///./club.db", "sqlite+aiosqlite:///./club.db"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ("postgresql+asyncpg://db/club", "postgresql+asyncpg://db/club"),
    ],
)
def test_async_database_url(url, expected):
    assert db.async_database_url(url) == expected


def test_engine_pool_choice():
    assert db._engine_kwargs("sqlite+aiosqlite:///:memory:")["poolclass"] is StaticPool
    assert db._engine_kwargs("sqlite+aiosqlite:///./club.db")["poolclass"] is NullPool
    assert db._engine_kwargs("postgresql+asyncpg://db/club") == {
        "echo": False,
        "pool_pre_ping": True,
    }


def test_get_engine_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        db.get_engine()


@pytest.mark.anyio
async def test_dispose_engine_resets_state(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    engine = db.get_engine()
    assert engine.url.drivername == "sqlite+aiosqlite"
    assert db.get_engine() is engine

    await db.dispose_engine()
    assert db.engine is None
    assert db.AsyncSessionLocal is None
