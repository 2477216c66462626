"""
Test fixtures for the Payments API test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test,
    with the currency catalogue already seeded
  - client: Async HTTP test client (unauthenticated)
  - customer_client: Client logged in as a registered Customer
  - second_customer_client: Another Customer, for cross-user tests
  - employee_client: Client logged in as a registered Employee (reviewer)
  - admin_client: Client logged in as an Admin (promoted in the DB)

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) with a StaticPool, so every
    session in a test sees the same database and no state leaks between
    tests. Foreign keys are enforced, as on the application engine.
  - We override FastAPI's get_db dependency to inject our test sessions,
    so the application code works exactly as it does in production.
  - Each logged-in fixture gets its OWN AsyncClient. Sharing one client and
    swapping its Authorization header would make every fixture the same
    user.
  - Users are created via the register endpoint and logged in via the
    login endpoint, exercising the real flow rather than DB inserts.
"""

import os

# Settings are read at import time; provide test values before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from payments_api.database import Base, enable_sqlite_foreign_keys, get_db
from payments_api.main import app
from payments_api.models.user import User, UserRole
from payments_api.services.currency_service import seed_currencies


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"

CUSTOMER = {
    "full_name": "Test Customer",
    "username": "customer1",
    "email": "customer1@example.com",
    "password": "SecurePass123!",
    "role": "Customer",
    "id_number": "8001015009087",
}

SECOND_CUSTOMER = {
    "full_name": "Second Customer",
    "username": "customer2",
    "email": "customer2@example.com",
    "password": "SecurePass456!",
    "role": "Customer",
}

EMPLOYEE = {
    "full_name": "Rita Reviewer",
    "username": "employee1",
    "email": "employee1@bank.example.com",
    "password": "ReviewPass789!",
    "role": "Employee",
    "employee_number": "EMP-0001",
}

ADMIN = {
    "full_name": "Ada Admin",
    "username": "admin1",
    "email": "admin1@bank.example.com",
    "password": "AdminPass123!",
    "role": "Employee",
}


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables and currencies for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        await seed_currencies(session)
        await session.commit()

    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine (service-level tests)."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app_with_test_db(session_factory):
    """
    Point the application's get_db at the test database.

    The override mirrors production get_db: commit on success, roll back on
    any exception.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_client(app_with_test_db):
    """
    Factory for independent test clients.

    Every client created through it is closed at teardown.
    """
    clients: list[AsyncClient] = []

    def _make() -> AsyncClient:
        ac = AsyncClient(
            transport=ASGITransport(app=app_with_test_db),
            base_url="http://test",
        )
        clients.append(ac)
        return ac

    yield _make

    for ac in clients:
        await ac.aclose()


async def register_and_login(ac: AsyncClient, user: dict) -> AsyncClient:
    """Register ``user`` through the API, log in and attach the Bearer token."""
    response = await ac.post("/api/auth/register", json=user)
    assert response.status_code == 201, f"Register failed: {response.text}"

    response = await ac.post(
        "/api/auth/login",
        json={"username": user["username"], "password": user["password"]},
    )
    assert response.status_code == 200, f"Login failed: {response.text}"
    ac.headers["Authorization"] = f"Bearer {response.json()['token']}"
    return ac


@pytest_asyncio.fixture
async def client(make_client):
    """Async HTTP test client with no credentials."""
    return make_client()


@pytest_asyncio.fixture
async def customer_client(make_client):
    return await register_and_login(make_client(), CUSTOMER)


@pytest_asyncio.fixture
async def second_customer_client(make_client):
    """A second Customer, for verifying that users cannot see each other's data."""
    return await register_and_login(make_client(), SECOND_CUSTOMER)


@pytest_asyncio.fixture
async def employee_client(make_client):
    return await register_and_login(make_client(), EMPLOYEE)


@pytest_asyncio.fixture
async def admin_client(make_client, session_factory):
    """
    Client logged in as an Admin.

    Admins cannot self-register, so the user signs up as an Employee and is
    then promoted directly in the database, the way an operator would with
    demo/promote_admin.py.
    """
    ac = await register_and_login(make_client(), ADMIN)
    async with session_factory() as session:
        await session.execute(
            update(User)
            .where(User.username == ADMIN["username"])
            .values(role=UserRole.ADMIN)
        )
        await session.commit()
    return ac


async def open_account(
    ac: AsyncClient,
    account_number: str = "ACC-0001",
    balance: str = "1000.00",
    currency_code: str = "USD",
    account_type: str = "Checking",
) -> dict:
    """Open a bank account through the API and return its JSON."""
    response = await ac.post(
        "/api/bank-accounts",
        json={
            "account_number": account_number,
            "account_type": account_type,
            "currency_code": currency_code,
            "balance": balance,
        },
    )
    assert response.status_code == 201, f"Open account failed: {response.text}"
    return response.json()


async def create_payment(
    ac: AsyncClient,
    account_id: str,
    amount: str = "100.00",
    currency_code: str = "USD",
) -> dict:
    """Create a payment through the API and return its JSON."""
    response = await ac.post(
        "/api/payments",
        json={
            "account_id": account_id,
            "amount": amount,
            "currency_code": currency_code,
            "payee_account": "GB29NWBK60161331926819",
            "payee_swift_code": "NWBKGB2L",
        },
    )
    assert response.status_code == 201, f"Create payment failed: {response.text}"
    return response.json()
