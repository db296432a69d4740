"""
Centralized Test Configuration.

The identity provider and the payment processor are replaced by in-process
fakes; the database is an in-memory SQLite shared through a StaticPool.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from parcelx_backend.app.main import app
from parcelx_backend.app.core.dependencies import get_identity_verifier, get_payment_gateway
from parcelx_backend.app.core.exceptions import PaymentGatewayError
from parcelx_backend.app.core.identity import TokenVerificationError
from parcelx_backend.app.core.payment_gateway import PaymentIntentRecord
from parcelx_backend.app.db.session import get_db, Base

# Import all models to ensure they're registered with Base
from parcelx_backend.app.models.user import User  # noqa: F401
from parcelx_backend.app.models.parcel import Parcel  # noqa: F401
from parcelx_backend.app.models.rider import Rider  # noqa: F401
from parcelx_backend.app.models.payment import Payment  # noqa: F401
from parcelx_backend.app.models.tracking_event import TrackingEvent  # noqa: F401

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

VALID_TOKEN = "valid-token"
TOKEN_CLAIMS = {"uid": "uid-alice", "email": "alice@test.com", "name": "Alice"}

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class FakeVerifier:
    """Accepts only VALID_TOKEN."""

    def __init__(self):
        self.seen = []

    async def verify(self, token):
        self.seen.append(token)
        if token != VALID_TOKEN:
            raise TokenVerificationError("Invalid ID token")
        return dict(TOKEN_CLAIMS)


class FakeGateway:
    """Payment processor double; intents are kept in memory."""

    def __init__(self):
        self.intents = {}
        self.created = []

    def add_intent(self, intent_id, status="succeeded", amount=5000, payer_email="alice@test.com"):
        self.intents[intent_id] = PaymentIntentRecord(
            id=intent_id,
            status=status,
            client_secret=f"{intent_id}_secret",
            amount=amount,
            currency="usd",
            metadata={"payerEmail": payer_email},
        )
        return self.intents[intent_id]

    async def create_intent(self, amount, metadata):
        intent_id = f"pi_{len(self.intents) + 1}"
        self.created.append((amount, metadata))
        record = self.add_intent(intent_id, status="requires_payment_method", amount=amount)
        record.metadata = dict(metadata)
        return record

    async def retrieve_intent(self, intent_id):
        if intent_id not in self.intents:
            raise PaymentGatewayError(f"No such payment_intent: '{intent_id}'")
        return self.intents[intent_id]


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture(autouse=True)
def apply_overrides(verifier, gateway):
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {VALID_TOKEN}"}


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session
