import pytest
from httpx import AsyncClient

from config import ApplicationConfig

ADMIN_API_KEY_HEADER = "X-Admin-API-Key"
SERVICE_HEADERS = {ADMIN_API_KEY_HEADER: ApplicationConfig.ADMIN_API_KEY}


async def fan_out(client: AsyncClient, **payload):
    body = {"title": "Request update", "message": "Request #42 changed"}
    body.update(payload)
    return await client.post("/notifications/fan-out", json=body, headers=SERVICE_HEADERS)


@pytest.mark.asyncio
async def test_fan_out_requires_api_key(client: AsyncClient):
    response = await client.post(
        "/notifications/fan-out", json={"title": "t", "message": "m", "user_ids": []}
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"

    response = await client.post(
        "/notifications/fan-out",
        json={"title": "t", "message": "m", "user_ids": []},
        headers={ADMIN_API_KEY_HEADER: "wrong"},
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_fan_out_needs_exactly_one_audience(client: AsyncClient):
    response = await fan_out(client, user_ids=[], roles=["user"])
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_FAILED"

    response = await fan_out(client)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_fan_out_by_role_and_organization(client: AsyncClient, seed_user):
    await seed_user("admin")
    await seed_user("legacy_admin")
    await seed_user("organization")
    await seed_user("staff")

    response = await fan_out(client, roles=["administrator"])
    assert response.status_code == 201
    assert response.json()["recipients"] == 2

    response = await fan_out(client, organization="ACME CORP")
    assert response.json()["recipients"] == 1

    response = await fan_out(client, organization="Nobody Inc")
    assert response.json()["recipients"] == 0


@pytest.mark.asyncio
async def test_inbox_read_state(client: AsyncClient, seed_user, login_as):
    account = await seed_user("staff")
    headers = await login_as(account)

    for _ in range(3):
        response = await fan_out(client, user_ids=[account["id"]])
        assert response.json()["recipients"] == 1

    response = await client.get("/notifications", headers=headers)
    assert response.status_code == 200
    inbox = response.json()
    assert len(inbox["notifications"]) == 3
    assert inbox["unread_count"] == 3
    first_id = inbox["notifications"][0]["id"]

    response = await client.post(f"/notifications/{first_id}/read", headers=headers)
    assert response.json() == {"changed": 1, "unread_count": 2}

    response = await client.post(f"/notifications/{first_id}/read", headers=headers)
    assert response.json() == {"changed": 0, "unread_count": 2}

    response = await client.get("/notifications", params={"unread_only": True}, headers=headers)
    assert len(response.json()["notifications"]) == 2

    response = await client.delete(f"/notifications/{first_id}", headers=headers)
    assert response.json() == {"changed": 1, "unread_count": 2}

    response = await client.post("/notifications/read-all", headers=headers)
    assert response.json() == {"changed": 2, "unread_count": 0}

    response = await client.get("/notifications/unread-count", headers=headers)
    assert response.json()["unread_count"] == 0


@pytest.mark.asyncio
async def test_other_users_notification_is_not_found(client: AsyncClient, seed_user, login_as):
    owner = await seed_user("staff")
    await fan_out(client, user_ids=[owner["id"]])
    owner_headers = await login_as(owner)
    notification_id = (await client.get("/notifications", headers=owner_headers)).json()[
        "notifications"
    ][0]["id"]

    other_headers = await login_as(await seed_user("organization"))
    response = await client.post(f"/notifications/{notification_id}/read", headers=other_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOTIFICATION_NOT_FOUND"
