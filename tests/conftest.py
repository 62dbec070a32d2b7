"""
Shared test fixtures for KundaPay.

Provides async test client, database session mocks, Redis mocks,
in-memory rate and promo sources, and JWT helpers.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from cryptography.fernet import Fernet
from httpx import ASGITransport, AsyncClient

from kundapay.api.deps import get_calculator, get_rate_repository
from kundapay.core import security
from kundapay.database import get_db
from kundapay.models.beneficiary import configure_fernet
from kundapay.redis_client import get_redis
from kundapay.services.limit_service import default_limits
from kundapay.services.promo_service import PromoValidation
from kundapay.services.quote_service import TransferQuoteCalculator
from kundapay.services.rate_service import StaticRateRepository

TEST_JWT_SECRET = "test-secret-for-hs256-signing-only"


# --- Fernet Key Fixture ---


@pytest.fixture(scope="session")
def test_fernet_key():
    """Generate a Fernet key for tests."""
    return Fernet.generate_key()


@pytest.fixture(autouse=True)
def setup_fernet(test_fernet_key):
    """Configure the Beneficiary model to use the test Fernet key."""
    configure_fernet(test_fernet_key)


# --- JWT Fixtures ---


@pytest.fixture(autouse=True)
def jwt_secret():
    """Verify tokens with a known HS256 secret for every test."""
    security.configure_keys(secret=TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    """JWT Authorization header for the test user."""
    token = security.create_access_token(str(user_id), "sender@example.com")
    return {"Authorization": f"Bearer {token}"}


# --- Mock Redis ---


@pytest.fixture
def mock_redis():
    """AsyncMock Redis client with common methods."""
    redis = AsyncMock()
    redis.setex = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.delete = AsyncMock()
    return redis


# --- Mock Database Session ---


@pytest.fixture
def mock_db():
    """AsyncMock database session."""
    db = AsyncMock()

    # Mock the result object returned by db.execute()
    mock_result = MagicMock()
    mock_result.scalar_one_or_none = MagicMock(return_value=None)
    mock_result.scalars.return_value.all.return_value = []
    mock_result.rowcount = 1
    db.execute = AsyncMock(return_value=mock_result)
    db.flush = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()

    return db


def _make_result(scalar=None, rows=None, count=None, rowcount=1):
    """Build a mock ``db.execute`` result."""
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=scalar)
    result.scalar_one = MagicMock(return_value=count)
    result.scalars.return_value.all.return_value = rows or []
    result.rowcount = rowcount
    return result


@pytest.fixture
def make_result():
    """Factory fixture for mock query results."""
    return _make_result


# --- Rate & Promo Sources ---


class FakePromoValidator:
    """In-memory promo validator keyed by (CODE, direction)."""

    def __init__(self, codes: dict | None = None):
        self.codes = codes or {}
        self.calls: list[tuple[str, str]] = []

    async def validate_promo_code(self, code, direction):
        self.calls.append((code, direction))
        validation = self.codes.get(((code or "").strip().upper(), direction))
        if validation is None:
            return PromoValidation(valid=False, message="Invalid promo code")
        return validation


@pytest.fixture
def rates():
    return StaticRateRepository()


@pytest.fixture
def promos():
    return FakePromoValidator()


@pytest.fixture
def calculator(rates, promos):
    return TransferQuoteCalculator(rates, promos, limits=default_limits())


# --- Dependency Override Helpers ---


@pytest_asyncio.fixture
async def client(mock_db, mock_redis, rates, calculator):
    """
    Async HTTP test client with the database, Redis, rate repository
    and calculator dependencies overridden to use test doubles.
    """
    from kundapay.main import app

    async def override_get_db():
        yield mock_db

    async def override_get_redis():
        return mock_redis

    async def override_get_rate_repository():
        return rates

    async def override_get_calculator():
        return calculator

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_rate_repository] = override_get_rate_repository
    app.dependency_overrides[get_calculator] = override_get_calculator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# --- Sample Data ---


@pytest.fixture
def sample_quote_request():
    """100 EUR from France to an Airtel Money wallet in Gabon."""
    return {
        "amount": 100,
        "direction": "FRANCE_TO_GABON",
        "payment_method": "BANK_TRANSFER",
        "receiving_method": "AIRTEL_MONEY",
    }


@pytest.fixture
def sample_transfer(sample_quote_request):
    """Valid transfer creation payload."""
    return {
        **sample_quote_request,
        "beneficiary": {
            "first_name": "Marie",
            "last_name": "Nze",
            "email": "Marie.Nze@Example.com",
            "phone": "+24174036033",
        },
        "funds_origin": "Salary",
        "transfer_reason": "Family support",
        "terms_accepted": True,
    }
