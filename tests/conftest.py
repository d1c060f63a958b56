import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from splitledger.db.session import Base, get_db
from splitledger.main import app
from splitledger.models import activity_log, expense, group, group_member, member  # noqa: F401


@pytest.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def client(db_engine):
    session_factory = sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def trip(client):
    """Group with members U1, U2, U3 (in that order) and no expenses."""
    for member_id, name in [("U1", "Asha"), ("U2", "Ben"), ("U3", "Chen")]:
        res = await client.post("/api/v1/members/", json={"id": member_id, "name": name})
        assert res.status_code == 201

    res = await client.post(
        "/api/v1/groups/",
        json={"name": "Goa trip", "created_by": "U1", "members": ["U2", "U3"]},
    )
    assert res.status_code == 201
    return res.json()["id"]
