"""Integration tests for the employee directory API (upsert, get, list)."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from leave_engine.services.employee import InMemoryEmployeeService, set_employee_service

if TYPE_CHECKING:
    from collections.abc import Iterator

    from httpx import AsyncClient

COMPANY_ID = uuid.uuid4()
USER_ID = uuid.uuid4()
EMPLOYEE_ID = uuid.uuid4()
AUTH_HEADERS = {
    "X-Company-Id": str(COMPANY_ID),
    "X-User-Id": str(USER_ID),
    "X-Role": "admin",
}
EMPLOYEE_HEADERS = {
    "X-Company-Id": str(COMPANY_ID),
    "X-User-Id": str(USER_ID),
    "X-Role": "employee",
}
EMPLOYEES_URL = f"/companies/{COMPANY_ID}/employees"


@pytest.fixture(autouse=True)
def _reset_employee_service() -> Iterator[None]:
    set_employee_service(InMemoryEmployeeService())
    yield
    set_employee_service(InMemoryEmployeeService())


def _employee_payload(
    name: str = "John Doe",
    email: str = "john@example.com",
    employee_type: str = "PERMANENT",
    role: str = "EMPLOYEE",
    archived: bool = False,
) -> dict:
    return {
        "name": name,
        "email": email,
        "employee_type": employee_type,
        "role": role,
        "archived": archived,
    }


# ---------------------------------------------------------------------------
# Upsert tests
# ---------------------------------------------------------------------------


async def test_upsert_employee(async_client: AsyncClient) -> None:
    """PUT creates an employee and returns expected fields."""
    resp = await async_client.put(
        f"{EMPLOYEES_URL}/{EMPLOYEE_ID}",
        json=_employee_payload(),
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == str(EMPLOYEE_ID)
    assert data["company_id"] == str(COMPANY_ID)
    assert data["name"] == "John Doe"
    assert data["email"] == "john@example.com"
    assert data["employee_type"] == "PERMANENT"
    assert data["role"] == "EMPLOYEE"
    assert data["archived"] is False


async def test_upsert_employee_update(async_client: AsyncClient) -> None:
    """PUT twice updates the employee fields on the second call."""
    url = f"{EMPLOYEES_URL}/{EMPLOYEE_ID}"

    resp1 = await async_client.put(url, json=_employee_payload(), headers=AUTH_HEADERS)
    assert resp1.status_code == 200

    resp2 = await async_client.put(
        url,
        json=_employee_payload(name="Jane Doe", email="jane@example.com", employee_type="FLEX_WORKER"),
        headers=AUTH_HEADERS,
    )
    assert resp2.status_code == 200
    data = resp2.json()
    assert data["name"] == "Jane Doe"
    assert data["email"] == "jane@example.com"
    assert data["employee_type"] == "FLEX_WORKER"
    assert data["id"] == str(EMPLOYEE_ID)


async def test_upsert_employee_type_is_uppercased(async_client: AsyncClient) -> None:
    resp = await async_client.put(
        f"{EMPLOYEES_URL}/{EMPLOYEE_ID}",
        json=_employee_payload(employee_type="freelancer"),
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["employee_type"] == "FREELANCER"


async def test_upsert_employee_invalid_role(async_client: AsyncClient) -> None:
    resp = await async_client.put(
        f"{EMPLOYEES_URL}/{EMPLOYEE_ID}",
        json=_employee_payload(role="OWNER"),
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 422
    assert resp.json()["field"] == "role"


# ---------------------------------------------------------------------------
# Get tests
# ---------------------------------------------------------------------------


async def test_get_employee(async_client: AsyncClient) -> None:
    """GET returns the employee created by PUT."""
    url = f"{EMPLOYEES_URL}/{EMPLOYEE_ID}"
    put_resp = await async_client.put(url, json=_employee_payload(), headers=AUTH_HEADERS)
    assert put_resp.status_code == 200

    get_resp = await async_client.get(url, headers=AUTH_HEADERS)
    assert get_resp.status_code == 200
    data = get_resp.json()
    assert data["id"] == str(EMPLOYEE_ID)
    assert data["name"] == "John Doe"
    assert data["employee_type"] == "PERMANENT"


async def test_get_employee_not_found(async_client: AsyncClient) -> None:
    """GET for a non-existent employee returns 404."""
    unknown_id = uuid.uuid4()
    resp = await async_client.get(f"{EMPLOYEES_URL}/{unknown_id}", headers=AUTH_HEADERS)
    assert resp.status_code == 404
    assert resp.json()["employee_id"] == str(unknown_id)


# ---------------------------------------------------------------------------
# List tests
# ---------------------------------------------------------------------------


async def test_list_employees_empty(async_client: AsyncClient) -> None:
    """GET list with no employees returns an empty list."""
    resp = await async_client.get(EMPLOYEES_URL, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["total"] == 0


async def test_list_employees_sorted_and_includes_archived(async_client: AsyncClient) -> None:
    """GET list returns every employee ordered by name, archived ones included."""
    bob_id = uuid.uuid4()
    alice_id = uuid.uuid4()

    await async_client.put(
        f"{EMPLOYEES_URL}/{bob_id}",
        json=_employee_payload(name="Bob", email="bob@example.com", archived=True),
        headers=AUTH_HEADERS,
    )
    await async_client.put(
        f"{EMPLOYEES_URL}/{alice_id}",
        json=_employee_payload(name="Alice", email="alice@example.com"),
        headers=AUTH_HEADERS,
    )

    list_resp = await async_client.get(EMPLOYEES_URL, headers=AUTH_HEADERS)
    assert list_resp.status_code == 200
    data = list_resp.json()
    assert data["total"] == 2
    assert [item["id"] for item in data["items"]] == [str(alice_id), str(bob_id)]
    assert data["items"][1]["archived"] is True


async def test_directory_feeds_year_view(async_client: AsyncClient) -> None:
    """Employees upserted through the directory appear in the leave balance year view."""
    await async_client.put(
        f"{EMPLOYEES_URL}/{EMPLOYEE_ID}",
        json=_employee_payload(employee_type="FLEX_WORKER"),
        headers=AUTH_HEADERS,
    )
    await async_client.put(
        f"{EMPLOYEES_URL}/{uuid.uuid4()}",
        json=_employee_payload(name="Root Admin", email="root@example.com", role="ADMIN"),
        headers=AUTH_HEADERS,
    )

    resp = await async_client.get(
        f"/companies/{COMPANY_ID}/leave-balances", params={"year": 2025}, headers=AUTH_HEADERS
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_employees"] == 1
    assert data["employees"][0]["id"] == str(EMPLOYEE_ID)
    assert data["employees"][0]["employee_type"] == "FLEX_WORKER"


# ---------------------------------------------------------------------------
# Authorization tests
# ---------------------------------------------------------------------------


async def test_upsert_employee_non_admin_forbidden(async_client: AsyncClient) -> None:
    """PUT with employee role returns 403."""
    resp = await async_client.put(
        f"{EMPLOYEES_URL}/{EMPLOYEE_ID}",
        json=_employee_payload(),
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 403


async def test_upsert_employee_manager_allowed(async_client: AsyncClient) -> None:
    headers = {**AUTH_HEADERS, "X-Role": "manager"}
    resp = await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload(), headers=headers)
    assert resp.status_code == 200


async def test_employee_can_get_and_list(async_client: AsyncClient) -> None:
    """Employee role can read the directory."""
    url = f"{EMPLOYEES_URL}/{EMPLOYEE_ID}"
    put_resp = await async_client.put(url, json=_employee_payload(), headers=AUTH_HEADERS)
    assert put_resp.status_code == 200

    get_resp = await async_client.get(url, headers=EMPLOYEE_HEADERS)
    assert get_resp.status_code == 200
    assert get_resp.json()["name"] == "John Doe"

    list_resp = await async_client.get(EMPLOYEES_URL, headers=EMPLOYEE_HEADERS)
    assert list_resp.status_code == 200
    assert list_resp.json()["total"] == 1


async def test_company_scope_mismatch(async_client: AsyncClient) -> None:
    headers = {**AUTH_HEADERS, "X-Company-Id": str(uuid.uuid4())}
    resp = await async_client.get(EMPLOYEES_URL, headers=headers)
    assert resp.status_code == 403
