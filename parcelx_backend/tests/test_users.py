"""
Integration tests for the user directory.

Covers login upsert, search, role lookup and role changes.
"""

import uuid

import pytest
from sqlalchemy import select, func

from parcelx_backend.app.models.enums import UserRole
from parcelx_backend.app.models.user import User


async def login(client, email="bob@test.com", **extra):
    payload = {"uid": f"uid-{email}", "email": email, "name": "Bob", "image": "", "provider": "google"}
    payload.update(extra)
    return await client.post("/users", json=payload)


@pytest.mark.asyncio
async def test_first_login_creates_user_with_default_role(client, db_session):
    response = await login(client)

    assert response.status_code == 201
    assert response.json()["success"] is True

    result = await db_session.execute(select(User).where(User.email == "bob@test.com"))
    user = result.scalar_one()
    assert user.role == UserRole.USER
    assert user.provider == "google"
    assert user.last_login is not None


@pytest.mark.asyncio
async def test_first_login_keeps_supplied_role(client, db_session):
    response = await login(client, email="boss@test.com", role="Admin")

    assert response.status_code == 201
    result = await db_session.execute(select(User).where(User.email == "boss@test.com"))
    assert result.scalar_one().role == UserRole.ADMIN


@pytest.mark.asyncio
async def test_repeated_login_only_refreshes_last_login(client, db_session):
    await login(client)
    result = await db_session.execute(select(User).where(User.email == "bob@test.com"))
    first = result.scalar_one()
    first_login, created_at = first.last_login, first.created_at

    response = await login(client, name="Robert")
    assert response.status_code == 200

    db_session.expire_all()
    count = await db_session.scalar(select(func.count()).select_from(User))
    assert count == 1

    result = await db_session.execute(select(User).where(User.email == "bob@test.com"))
    user = result.scalar_one()
    assert user.name == "Bob"
    assert user.created_at == created_at
    assert user.last_login >= first_login


@pytest.mark.asyncio
async def test_login_with_null_profile_fields_uses_defaults(client, db_session):
    response = await client.post("/users", json={
        "uid": "uid-null", "email": "null@test.com", "name": None, "image": None, "provider": None
    })

    assert response.status_code == 201
    user = (await db_session.execute(select(User).where(User.email == "null@test.com"))).scalar_one()
    assert user.name == ""
    assert user.image == ""
    assert user.provider == "email"
    assert user.role == UserRole.USER


@pytest.mark.asyncio
async def test_login_without_email_is_rejected(client):
    response = await client.post("/users", json={"uid": "x", "name": "Nobody"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_BAD_REQUEST_001"


@pytest.mark.asyncio
async def test_search_matches_email_or_name_case_insensitively(client):
    await login(client, email="carol@test.com", name="Carol Smith")
    await login(client, email="dave@test.com", name="Dave")

    response = await client.get("/users/search", params={"query": "SMITH"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [u["email"] for u in data] == ["carol@test.com"]
    assert "_id" in data[0]


@pytest.mark.asyncio
async def test_search_is_capped_at_ten_results(client):
    for i in range(12):
        await login(client, email=f"user{i}@test.com")

    response = await client.get("/users/search", params={"query": "user"})

    assert response.status_code == 200
    assert len(response.json()["data"]) == 10


@pytest.mark.asyncio
async def test_search_requires_query(client):
    response = await client.get("/users/search", params={"query": "  "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_role_returns_profile(client):
    await login(client)

    response = await client.get("/users/role", params={"email": "bob@test.com"})

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "user"
    assert body["data"]["email"] == "bob@test.com"
    assert body["data"]["name"] == "Bob"


@pytest.mark.asyncio
async def test_get_role_errors(client):
    missing = await client.get("/users/role")
    unknown = await client.get("/users/role", params={"email": "ghost@test.com"})

    assert missing.status_code == 400
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_update_role(client, db_session, auth_headers):
    await login(client)
    user_id = (await db_session.execute(select(User.id).where(User.email == "bob@test.com"))).scalar_one()

    response = await client.patch(f"/users/{user_id}/role", json={"role": "RIDER"}, headers=auth_headers)

    assert response.status_code == 200
    db_session.expire_all()
    refreshed = await db_session.get(User, user_id)
    assert refreshed.role == UserRole.RIDER


@pytest.mark.asyncio
async def test_update_role_accepts_hyphenated_id(client, db_session, auth_headers):
    await login(client)
    user = (await db_session.execute(select(User).where(User.email == "bob@test.com"))).scalar_one()

    response = await client.patch(
        f"/users/{uuid.UUID(user.id)}/role", json={"role": "admin"}, headers=auth_headers
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_role_errors(client, db_session, auth_headers):
    await login(client)
    user = (await db_session.execute(select(User).where(User.email == "bob@test.com"))).scalar_one()

    bad_role = await client.patch(f"/users/{user.id}/role", json={"role": "pilot"}, headers=auth_headers)
    bad_id = await client.patch("/users/not-an-id/role", json={"role": "admin"}, headers=auth_headers)
    unknown = await client.patch(f"/users/{uuid.uuid4().hex}/role", json={"role": "admin"}, headers=auth_headers)

    assert bad_role.status_code == 400
    assert bad_id.status_code == 400
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_list_users_newest_first(client, auth_headers):
    await login(client, email="first@test.com")
    await login(client, email="second@test.com")

    response = await client.get("/users", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [u["email"] for u in body["data"]] == ["second@test.com", "first@test.com"]
