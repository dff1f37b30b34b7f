from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from leave_engine.db import create_tables, get_session
from leave_engine.main import app
from leave_engine.schemas.auth import AuthContext
from leave_engine.services.compensation import InMemoryCompensationRequestService, set_compensation_request_service
from leave_engine.services.employee import EmployeeInfo, InMemoryEmployeeService, set_employee_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """A fresh SQLite database file per test, with every table created.

    A file (not :memory:) so that concurrent sessions get their own
    connections and writes are serialized by SQLite's locking.
    """
    _engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'leave.db'}")
    await create_tables(_engine)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def employee_service() -> Iterator[InMemoryEmployeeService]:
    svc = InMemoryEmployeeService()
    set_employee_service(svc)
    yield svc
    set_employee_service(InMemoryEmployeeService())


@pytest.fixture
def compensation_service() -> Iterator[InMemoryCompensationRequestService]:
    svc = InMemoryCompensationRequestService()
    set_compensation_request_service(svc)
    yield svc
    set_compensation_request_service(InMemoryCompensationRequestService())


@pytest.fixture
def company_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def admin(company_id: uuid.UUID) -> AuthContext:
    return AuthContext(company_id=company_id, user_id=uuid.uuid4(), user_name="Ada Admin", role="ADMIN")


@pytest.fixture
def make_employee(
    employee_service: InMemoryEmployeeService, company_id: uuid.UUID
) -> Callable[..., EmployeeInfo]:
    """Seed an employee into the directory and return it."""

    def _make(name: str = "Jane Doe", employee_type: str = "PERMANENT", **kwargs: object) -> EmployeeInfo:
        employee = EmployeeInfo(
            id=kwargs.pop("id", None) or uuid.uuid4(),
            company_id=kwargs.pop("company_id", None) or company_id,
            name=name,
            email=f"{name.split()[0].lower()}@example.com",
            employee_type=employee_type,
            **kwargs,
        )
        employee_service.seed(employee)
        return employee

    return _make
