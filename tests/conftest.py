# --- keep this shim at the very top ---
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
# --------------------------------------

import httpx
import pytest
import pytest_asyncio

from contextlib import asynccontextmanager

# In-memory SQLite for every test; never touch a real database.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.pop("DB_POOL_SIZE", None)
os.environ.pop("DB_MAX_OVERFLOW", None)

from pokemon_api import db  # noqa: E402
from pokemon_api.settings import settings  # noqa: E402

import pokemon_api.main as app_main  # noqa: E402

AUTH = ("ash", "pikachu")


@pytest.fixture(autouse=True)
def _restore_db_globals(monkeypatch):
    """Undo per-test `db.configure_engine` calls so module globals don't leak."""
    monkeypatch.setattr(db, "engine", db.engine)
    monkeypatch.setattr(db, "SessionLocal", db.SessionLocal)
    yield


@pytest_asyncio.fixture
async def memory_db(monkeypatch):
    """
    Fresh in-memory database per test.
    - Create the schema.
    - Route request sessions to this engine.
    - Replace the lifespan so startup doesn't wait on a real DB.
    - Pin the basic-auth credentials to `AUTH`.
    """
    db.configure_engine("sqlite+aiosqlite:///:memory:")
    await db.init_db()

    async def override_get_session():
        async with db.SessionLocal() as session:
            yield session

    app_main.app.dependency_overrides[app_main.get_session] = override_get_session

    @asynccontextmanager
    async def test_lifespan(_app):
        await db.init_db()
        yield

    monkeypatch.setattr(
        app_main.app.router, "lifespan_context", test_lifespan, raising=False
    )
    monkeypatch.setattr(settings, "AUTH_USERNAME", AUTH[0])
    monkeypatch.setattr(settings, "AUTH_PASSWORD", AUTH[1])

    yield

    app_main.app.dependency_overrides.pop(app_main.get_session, None)


@pytest_asyncio.fixture
async def session(memory_db):
    async with db.SessionLocal() as s:
        yield s


@pytest_asyncio.fixture
async def test_client(memory_db):
    transport = httpx.ASGITransport(app=app_main.app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as c:
        yield c


def make_pokemon(i: int = 1, **overrides) -> dict:
    """Build a valid create payload; ``i`` varies name/height/weight."""
    data = {
        "name": f"pokemon-{i}",
        "height": i,
        "weight": i * 10,
        "image": f"https://img.example/{i}.png",
    }
    data.update(overrides)
    return data
