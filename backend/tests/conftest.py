import os
import sys
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

# Allow `import stackmarks` without installing the package.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Keep the default engine and data dir away from the real data directory.
_TMP_DATA = tempfile.mkdtemp(prefix="stackmarks-test-")
os.environ.setdefault("DATA_DIR", _TMP_DATA)
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TMP_DATA}/default.db")

from httpx import ASGITransport, AsyncClient  # noqa: E402

from stackmarks.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    get_db,
    get_write_db,
    init_db,
    write_lock,
)
from stackmarks.main import app  # noqa: E402
from stackmarks.services import HierarchyStore, create_user  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db):
    created = await create_user(db, "alice", "not-a-real-hash")
    await db.commit()
    return created


@pytest_asyncio.fixture
async def other_user(db):
    created = await create_user(db, "mallory", "not-a-real-hash")
    await db.commit()
    return created


@pytest.fixture
def store(db, user):
    return HierarchyStore(db, user.id)


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_write_db():
        async with write_lock:
            async with session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_write_db] = override_get_write_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
