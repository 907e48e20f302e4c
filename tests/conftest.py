# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest fixtures. Each test gets its own SQLite file database seeded with invite "Invite"."""

from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hub_redirector import rate_limit
from hub_redirector.database import create_engine, get_db
from hub_redirector.main import app
from hub_redirector.models import Base
from hub_redirector.services.invites import create_invites

INVITE = "Invite"


@pytest.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with maker() as session:
        await create_invites(session, [INVITE])
    return maker


@pytest.fixture(autouse=True)
def no_rate_limits(monkeypatch):
    """Disable rate limits unless a test sets its own."""
    monkeypatch.setattr(rate_limit, "LIMITS", {})
    monkeypatch.setattr(rate_limit, "_last_prune", 0.0)
    rate_limit._buckets.clear()
    yield
    rate_limit._buckets.clear()


@pytest.fixture
def override_db(session_maker):
    async def _get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def make_client(override_db) -> AsyncIterator[Callable[[str], AsyncClient]]:
    """Factory for clients connecting from a given source address."""
    clients: list[AsyncClient] = []

    def _make(ip: str = "127.0.0.1") -> AsyncClient:
        transport = ASGITransport(app=app, client=(ip, 50000))
        ac = AsyncClient(transport=transport, base_url="http://test")
        clients.append(ac)
        return ac

    yield _make
    for ac in clients:
        await ac.aclose()


@pytest.fixture
def client(make_client) -> AsyncClient:
    return make_client("127.0.0.1")
