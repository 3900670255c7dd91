"""
User management endpoint tests — listing, paging, create / update rules.
"""

import uuid

import pytest
from httpx import AsyncClient

from app.core.security import verify_password
from app.models.user import User

API = "/api/v1"


@pytest.mark.asyncio
async def test_list_users_is_paged_and_ordered_by_name(
    async_client: AsyncClient, make_user, jury_user, employee_headers
):
    for name in ("Charlie", "Alice", "Bob"):
        await make_user(f"{name.lower()}@office.test", name=name)
    # employee_user (Eddie Employee) + jury_user (Judith Jury) + 3 above

    page1 = await async_client.get(f"{API}/users", params={"pageSize": 2}, headers=employee_headers)
    assert page1.status_code == 200
    body = page1.json()
    assert [u["name"] for u in body["items"]] == ["Alice", "Bob"]
    assert body["totalCount"] == 5
    assert body["totalPages"] == 3
    assert body["hasPreviousPage"] is False
    assert body["hasNextPage"] is True

    page3 = await async_client.get(
        f"{API}/users", params={"page": 3, "pageSize": 2}, headers=employee_headers
    )
    assert [u["name"] for u in page3.json()["items"]] == ["Judith Jury"]
    assert page3.json()["hasNextPage"] is False


@pytest.mark.asyncio
async def test_page_size_is_bounded(async_client: AsyncClient, employee_headers):
    resp = await async_client.get(f"{API}/users", params={"pageSize": 101}, headers=employee_headers)
    assert resp.status_code == 400
    assert "pageSize" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_create_user_as_jury(async_client: AsyncClient, jury_headers, db_session):
    resp = await async_client.post(
        f"{API}/users",
        json={"name": "Nina New", "email": "Nina@Office.test", "password": "secret123", "role": "EMPLOYEE"},
        headers=jury_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["email"] == "nina@office.test"
    assert data["role"] == "EMPLOYEE"
    assert "password" not in data and "hashedPassword" not in data

    user = await db_session.get(User, uuid.UUID(data["id"]))
    assert verify_password("secret123", user.hashed_password)


@pytest.mark.asyncio
async def test_create_user_duplicate_email_conflicts(
    async_client: AsyncClient, employee_user, jury_headers
):
    resp = await async_client.post(
        f"{API}/users",
        json={"name": "Copy", "email": "EMP@office.test", "password": "secret123"},
        headers=jury_headers,
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_user_requires_jury(async_client: AsyncClient, employee_headers):
    resp = await async_client.post(
        f"{API}/users",
        json={"name": "Sneaky", "email": "sneaky@office.test", "password": "secret123", "role": "JURY"},
        headers=employee_headers,
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_user_keeps_password_when_omitted(
    async_client: AsyncClient, employee_user, jury_headers, session_factory
):
    resp = await async_client.put(
        f"{API}/users/{employee_user.id}",
        json={
            "id": str(employee_user.id),
            "name": "Eddie Renamed",
            "email": "eddie@office.test",
            "role": "JURY",
        },
        headers=jury_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Eddie Renamed"
    assert resp.json()["role"] == "JURY"

    async with session_factory() as session:
        user = await session.get(User, employee_user.id)
        assert user.email == "eddie@office.test"
        assert verify_password("secret123", user.hashed_password)


@pytest.mark.asyncio
async def test_update_user_changes_password_when_given(
    async_client: AsyncClient, employee_user, jury_headers, session_factory
):
    resp = await async_client.put(
        f"{API}/users/{employee_user.id}",
        json={
            "id": str(employee_user.id),
            "name": employee_user.name,
            "email": employee_user.email,
            "password": "brand-new-pw",
            "role": "EMPLOYEE",
        },
        headers=jury_headers,
    )
    assert resp.status_code == 200

    async with session_factory() as session:
        user = await session.get(User, employee_user.id)
        assert verify_password("brand-new-pw", user.hashed_password)


@pytest.mark.asyncio
async def test_update_user_id_mismatch(async_client: AsyncClient, employee_user, jury_user, jury_headers):
    resp = await async_client.put(
        f"{API}/users/{employee_user.id}",
        json={"id": str(jury_user.id), "name": "X", "email": "x@office.test", "role": "EMPLOYEE"},
        headers=jury_headers,
    )
    assert resp.status_code == 400
    assert "id" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_update_user_email_collision_is_case_insensitive(
    async_client: AsyncClient, employee_user, jury_user, jury_headers
):
    resp = await async_client.put(
        f"{API}/users/{employee_user.id}",
        json={
            "id": str(employee_user.id),
            "name": "Eddie",
            "email": "JURY@office.test",
            "role": "EMPLOYEE",
        },
        headers=jury_headers,
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_get_unknown_user_is_404(async_client: AsyncClient, employee_headers):
    resp = await async_client.get(
        f"{API}/users/00000000-0000-0000-0000-000000000000", headers=employee_headers
    )
    assert resp.status_code == 404
    assert resp.json()["success"] is False
    assert "timestamp" in resp.json()
