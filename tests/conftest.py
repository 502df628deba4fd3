import os
import tempfile
from uuid import uuid4

# Test settings must be in the environment before linkfolio is imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="linkfolio-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["DATABASE_SCHEMA"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from linkfolio.core.database import async_session_factory, close_db, drop_db, init_db
from linkfolio.core.security import create_access_token
from linkfolio.main import app
from linkfolio.models import Link, Profile
from linkfolio.schemas.link import LinkCreate
from linkfolio.services import link_service


@pytest_asyncio.fixture(autouse=True)
async def database():
    """Fresh tables for every test."""
    await init_db()
    try:
        yield
    finally:
        await drop_db()
        await close_db()


@pytest_asyncio.fixture
async def session():
    async with async_session_factory() as session:
        yield session


async def _make_profile(session, username: str) -> Profile:
    profile = Profile(
        id=uuid4(),
        username=username,
        display_name=username.title(),
        bio=f"{username}'s links",
        avatar_url=f"https://avatars.example.com/{username}.png",
    )
    session.add(profile)
    await session.commit()
    return profile


@pytest_asyncio.fixture
async def alice(session) -> Profile:
    return await _make_profile(session, "alice")


@pytest_asyncio.fixture
async def bob(session) -> Profile:
    return await _make_profile(session, "bob")


@pytest_asyncio.fixture
async def make_link(session):
    """Create and commit a link for an owner."""

    async def _make(owner: Profile, title: str, url: str | None = None, **kwargs) -> Link:
        link = await link_service.create_link(
            session,
            owner.id,
            LinkCreate(title=title, url=url or f"https://{title.lower()}.example.com", **kwargs),
        )
        await session.commit()
        return link

    return _make


@pytest.fixture
def alice_headers(alice) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(alice.id)}"}


@pytest.fixture
def bob_headers(bob) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(bob.id)}"}


@pytest_asyncio.fixture
async def api_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
