"""
Shared fixtures: an in-memory SQLite database, a fake token store, the four
demo accounts with their auth headers, and a small fleet (van, driver, trip).
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from fleetflow.app.main import app
from fleetflow.app.db.session import get_db, Base
import fleetflow.app.core.redis_client as redis_client_module
from fleetflow.app.services.seed import ensure_demo_users

# One shared connection so every session sees the same in-memory database
engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

PASSWORDS = {
    "MANAGER": ("manager@fleetflow.com", "manager123"),
    "DISPATCHER": ("dispatcher@fleetflow.com", "dispatcher123"),
    "SAFETY_OFFICER": ("safety@fleetflow.com", "safety123"),
    "FINANCIAL_ANALYST": ("finance@fleetflow.com", "finance123"),
}


class FakeTokenStore:
    """The slice of redis.asyncio.Redis used by token revocation. ``down`` simulates an outage."""

    def __init__(self):
        self.values = {}
        self.ttls = {}
        self.down = False

    def _check(self):
        if self.down:
            raise ConnectionError("Redis is unavailable")

    async def ping(self):
        self._check()
        return True

    async def setex(self, key, ttl, value):
        self._check()
        self.values[key] = value
        self.ttls[key] = ttl
        return True

    async def exists(self, key):
        self._check()
        return int(key in self.values)

    async def reset(self):
        self.values.clear()
        self.ttls.clear()
        self.down = False


@pytest.fixture(scope="session")
def token_store():
    return FakeTokenStore()


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(token_store):
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = token_store

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database(token_store):
    """Fresh schema and an empty token store for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await token_store.reset()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac



# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def demo_users(db_session):
    """The four role accounts."""
    users = await ensure_demo_users(db_session)
    await db_session.commit()
    return users


async def _login(client, role):
    email, password = PASSWORDS[role]
    response = await client.post("/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def manager_headers(client, demo_users):
    return await _login(client, "MANAGER")


@pytest.fixture
async def dispatcher_headers(client, demo_users):
    return await _login(client, "DISPATCHER")


@pytest.fixture
async def safety_headers(client, demo_users):
    return await _login(client, "SAFETY_OFFICER")


@pytest.fixture
async def finance_headers(client, demo_users):
    return await _login(client, "FINANCIAL_ANALYST")


# Fleet fixtures (created through the API)

VAN = {
    "name": "VN-003",
    "license_plate": "MH02AB0003",
    "model": "Ford Transit",
    "vehicle_type": "van",
    "max_load_capacity": 3500,
    "current_odometer": 34560,
    "region": "West",
    "acquisition_cost": 350000,
}

DRIVER = {
    "name": "John Doe",
    "email": "John@Example.com",
    "license_number": "DL-2024-001",
    "license_expiry": "2099-12-31",
    "safety_score": 95,
}


@pytest.fixture
async def van(client, manager_headers):
    response = await client.post("/v1/vehicles", json=VAN, headers=manager_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def driver(client, safety_headers):
    response = await client.post("/v1/drivers", json=DRIVER, headers=safety_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def draft_trip(client, dispatcher_headers, van, driver):
    response = await client.post("/v1/trips", json={
        "vehicle_id": van["id"],
        "driver_id": driver["id"],
        "cargo_weight": 1200,
        "cargo_description": "Electronics",
        "start_location": "Warehouse A",
        "end_location": "Store B",
    }, headers=dispatcher_headers)
    assert response.status_code == 201, response.text
    return response.json()
