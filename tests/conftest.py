"""Pytest fixtures for payroll admin tests."""

from __future__ import annotations

import itertools
from collections.abc import AsyncGenerator, Callable
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from payroll_admin.api.app import create_app
from payroll_admin.config import Settings
from payroll_admin.database import StateRepository
from payroll_admin.events import StoreEvent
from payroll_admin.models import Employee, EmployeeStatus
from payroll_admin.services.payroll_run_service import PayrollRunService
from payroll_admin.services.store import Store

# In-memory SQLite shared across sessions of one engine
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        state_key="test-state",
        seed=12345,
        tax_rate=Decimal("0.10"),
        pension_rate=Decimal("0.08"),
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
    )


@pytest.fixture
def repository() -> StateRepository:
    """Fresh in-memory state database."""
    return StateRepository.from_url(TEST_DATABASE_URL)


@pytest.fixture
def id_factory() -> Callable[[str], str]:
    """Predictable ids: emp-test-1, run-test-2, ..."""
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}-test-{next(counter)}"


@pytest.fixture
def store(repository: StateRepository, id_factory: Callable[[str], str]) -> Store:
    return Store(repository=repository, state_key="test-state", id_factory=id_factory)


@pytest.fixture
def events(store: Store) -> list[StoreEvent]:
    """Every event the store emits during the test."""
    received: list[StoreEvent] = []
    store.subscribe(received.append)
    return received


@pytest.fixture
def service(store: Store) -> PayrollRunService:
    return PayrollRunService(store)


@pytest.fixture
def employee() -> Employee:
    return Employee(
        id="emp-x",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="+1-555-0100",
        department="Engineering",
        role="Tech Lead",
        hire_date="2020-01-15",
        base_salary=Decimal("60000"),
        status=EmployeeStatus.ACTIVE,
        bank_name="City Bank",
        bank_account_no="****1234",
    )


@pytest_asyncio.fixture
async def client(store: Store, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to an app that uses the test store."""
    app = create_app(store=store, settings=settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
