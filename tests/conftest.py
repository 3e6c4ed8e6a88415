from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tracker.core.config import Settings
from tracker.db.base import Base
from tracker.db.session import build_engine, build_sessionmaker
from tracker.main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Fresh SQLite file per test, fixed secret, no .env."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}",
        secret_key=TEST_SECRET,
    )


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    # entering the context runs the lifespan: authenticator + tables
    with TestClient(app) as c:
        yield c


@pytest.fixture()
async def db(settings: Settings):
    """AsyncSession on a migrated database, for service-level tests."""
    engine = build_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with build_sessionmaker(engine)() as session:
        yield session
    await engine.dispose()


@pytest.fixture()
def signup(client: TestClient):
    """Register an account over HTTP; returns (token, user_id)."""

    def _signup(username: str = "peter", email: str = "p@x.com", password: str = "webslinger"):
        resp = client.post("/signup", json={"username": username, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        token = resp.json()["token"]
        profile = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.status_code == 200, profile.text
        return token, profile.json()["id"]

    return _signup
