import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Honour any externally provided DATABASE_URL (e.g. CI may set a file-backed DB)
# but fall back to an in-memory SQLite database so local runs remain isolated.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ALLOWED_ORIGINS", "http://testserver")
os.environ.setdefault("DISABLE_RATE_LIMITS", "true")

# Register every model with the declarative Base before create_all runs.
from clubrank import db, models  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_engine():
    """Give every test its own engine, created lazily inside the test's loop."""

    db.engine = None
    db.AsyncSessionLocal = None
    yield
    db.engine = None
    db.AsyncSessionLocal = None


@pytest.fixture
async def session(anyio_backend):
    engine = db.get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.drop_all)
        await conn.run_sync(db.Base.metadata.create_all)
    async with db.AsyncSessionLocal() as s:
        yield s
    await db.dispose_engine()


@pytest.fixture
async def seeded(session):
    """Two clubs; ``cat-singles`` in club ``c1`` with p1..p4 on its roster.

    ``p5`` belongs to ``c1`` but is not on the roster, ``p9`` belongs to ``c2``.
    """

    session.add_all(
        [
            models.Club(id="c1", name="Riverside"),
            models.Club(id="c2", name="Hilltop"),
            models.Category(id="cat-singles", name="Open Singles", club_id="c1"),
            models.Category(
                id="cat-doubles", name="Open Doubles", club_id="c1", is_doubles=True
            ),
            models.Category(id="cat-other", name="Hilltop Open", club_id="c2"),
        ]
    )
    players = [
        models.Player(id="p1", name="Alice", email="alice@example.com", club_id="c1"),
        models.Player(id="p2", name="Bob", email="bob@example.com", club_id="c1"),
        models.Player(id="p3", name="Carla", club_id="c1"),
        models.Player(id="p4", name="Dan", club_id="c1"),
        models.Player(id="p5", name="Eve", club_id="c1"),
        models.Player(id="p9", name="Zed", club_id="c2"),
    ]
    session.add_all(players)
    await session.flush()
    session.add_all(
        models.CategoryPlayer(category_id=cat, player_id=pid)
        for cat in ("cat-singles", "cat-doubles")
        for pid in ("p1", "p2", "p3", "p4")
    )
    session.add(models.CategoryPlayer(category_id="cat-other", player_id="p9"))
    await session.commit()
    return session
