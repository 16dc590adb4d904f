"""Shared test fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from tests.fakes import ALICE, BOB, ETH, FakeLedger, build_session


@pytest.fixture
def ledger() -> FakeLedger:
    """Ledger seeded with one listing (token 1, 0.5 ETH) and one open auction (token 2)."""
    fake = FakeLedger()
    t1 = fake.mint(ALICE)
    t2 = fake.mint(BOB)
    fake.add_listing(ALICE, t1, ETH // 2)
    fake.add_auction(BOB, t2, ETH, end_time=int(fake.now) + 3600)
    return fake


@pytest.fixture
def docs() -> dict[int, dict]:
    return {
        1: {"name": "Harbor Lights", "image": "ipfs://QmImg1", "category": "art"},
        2: {"name": "Glitch Fox", "image": "ipfs://QmImg2", "category": "gaming"},
    }


@pytest_asyncio.fixture
async def client(ledger, docs) -> AsyncClient:
    """Async HTTP client against the app, with a session built on the fake ledger.

    ASGITransport does not run the lifespan, so the session is installed directly.
    """
    session = build_session(ledger, docs)
    app.state.session = session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await session.close()
    app.state.session = None
