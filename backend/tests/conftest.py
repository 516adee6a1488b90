"""
ShareBite Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── listing_store / request_store: dict-backed stores (no database)
    ├── identity_verifier: token → identity table (no Firebase)
    ├── mock_db_session / mock_session_factory: AsyncMock session for SQL store tests
    ├── test_app: create_app() wired with the fakes above
    └── test_client: HTTPX AsyncClient talking to test_app over ASGI
"""

import copy
import os
import uuid
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings BEFORE any sharebite imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["FIREBASE_CREDENTIALS_PATH"] = "./no-such-service-key.json"

from sharebite.exceptions import ForbiddenError  # noqa: E402
from sharebite.services.identity import CallerIdentity, IdentityVerifier  # noqa: E402
from sharebite.stores.base import ListingStore, RequestStore  # noqa: E402


ALICE = CallerIdentity(id="uid-alice", email="a@x.com", name="Alice")
BOB = CallerIdentity(id="uid-bob", email="b@x.com", name="Bob")

TOKENS = {
    "token-alice": ALICE,
    "token-bob": BOB,
}


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ══════════════════════════════════════════════════════════════════════════
# In-memory collaborators
# ══════════════════════════════════════════════════════════════════════════

class InMemoryListingStore(ListingStore):
    """ListingStore over an insertion-ordered dict. Documents are deep-copied in and out."""

    def __init__(self):
        self.listings: Dict[uuid.UUID, Dict[str, Any]] = {}

    @staticmethod
    def _out(listing_id: uuid.UUID, document: Dict[str, Any]) -> Dict[str, Any]:
        return {"_id": str(listing_id), **copy.deepcopy(document)}

    async def insert(self, document: Dict[str, Any]) -> uuid.UUID:
        listing_id = uuid.uuid4()
        self.listings[listing_id] = copy.deepcopy(document)
        return listing_id

    async def find_all(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        docs = [self._out(i, d) for i, d in self.listings.items()]
        return docs if limit is None else docs[:limit]

    async def find_by_id(self, listing_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        document = self.listings.get(listing_id)
        return self._out(listing_id, document) if document is not None else None

    async def find_by_donor_email(self, email: str) -> List[Dict[str, Any]]:
        return [
            self._out(i, d)
            for i, d in self.listings.items()
            if (d.get("donor") or {}).get("email") == email
        ]

    async def update(self, listing_id: uuid.UUID, changes: Dict[str, Any]) -> bool:
        if listing_id not in self.listings:
            return False
        self.listings[listing_id].update(copy.deepcopy(changes))
        return True

    async def delete(self, listing_id: uuid.UUID) -> bool:
        return self.listings.pop(listing_id, None) is not None

    async def ping(self) -> bool:
        return True


class InMemoryRequestStore(RequestStore):
    def __init__(self):
        self.requests: List[Dict[str, Any]] = []

    async def insert(self, document: Dict[str, Any]) -> uuid.UUID:
        request_id = uuid.uuid4()
        self.requests.append({"_id": str(request_id), **copy.deepcopy(document)})
        return request_id

    async def find_by_donor_email(self, email: str) -> List[Dict[str, Any]]:
        matches = [copy.deepcopy(r) for r in self.requests if r["donorEmail"] == email]
        return sorted(matches, key=lambda r: r["requestDate"], reverse=True)


class FakeIdentityVerifier(IdentityVerifier):
    """Accepts exactly the tokens in its table; everything else is a bad credential."""

    def __init__(self, tokens: Dict[str, CallerIdentity]):
        self.tokens = tokens
        self.calls: List[str] = []

    async def verify_credential(self, token: str) -> CallerIdentity:
        self.calls.append(token)
        identity = self.tokens.get(token)
        if identity is None:
            raise ForbiddenError(message="Forbidden: Invalid token")
        return identity


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def listing_store():
    return InMemoryListingStore()


@pytest.fixture
def request_store():
    return InMemoryRequestStore()


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier(dict(TOKENS))


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession: execute/get/commit are awaitable, add is plain.

    Usage:
        mock_db_session.get.return_value = listing
        await store.find_by_id(listing.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_session_factory(mock_db_session):
    """Callable returning an async context manager that yields mock_db_session."""
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=mock_db_session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory


@pytest.fixture
def test_app(listing_store, request_store, identity_verifier):
    from sharebite.main import create_app

    return create_app(
        listing_store=listing_store,
        request_store=request_store,
        identity_verifier=identity_verifier,
    )


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
