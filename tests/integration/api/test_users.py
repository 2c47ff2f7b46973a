import pytest
from httpx import AsyncClient

from tests.utils.json_compare import exclude_keys, exclude_keys_all

VOLATILE_KEYS = {"id", "locked_at", "last_login_at"}


@pytest.mark.asyncio
async def test_administrator_creates_and_lists_accounts(
    client: AsyncClient, seed_user, login_as, test_data
):
    headers = await login_as(await seed_user("admin"))
    payload = test_data.account("new_account")

    response = await client.post("/users", json=payload, headers=headers)

    assert response.status_code == 201
    created = exclude_keys(response.json(), VOLATILE_KEYS)
    assert created == {
        "username": "mlee",
        "display_name": "Morgan Lee",
        "email": "mlee@city.gov",
        "organization": None,
        "role": "user",
        "is_active": True,
        "password_change_required": False,
        "failed_login_attempts": 0,
    }

    response = await client.post("/users", json=payload, headers=headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USERNAME_TAKEN"

    response = await client.get("/users", params={"role": "user"}, headers=headers)
    assert response.status_code == 200
    assert exclude_keys_all(response.json()["accounts"], VOLATILE_KEYS) == [created]

    response = await client.post(
        "/auth/login", json={"username": "mlee", "password": payload["password"]}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_create_account_rejects_unknown_role(client: AsyncClient, seed_user, login_as):
    headers = await login_as(await seed_user("admin"))

    response = await client.post(
        "/users",
        json={"username": "x", "password": "Welcome2024", "role": "supervisor"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ROLE"


@pytest.mark.asyncio
async def test_non_administrator_is_forbidden(client: AsyncClient, seed_user, login_as):
    headers = await login_as(await seed_user("staff"))

    response = await client.get("/users", headers=headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_unlock_after_lockout(client: AsyncClient, seed_user, login_as):
    admin_headers = await login_as(await seed_user("admin"))
    account = await seed_user("staff", failed_login_attempts=4)
    await client.post("/auth/login", json={"username": "jdoe", "password": "nope"})

    response = await client.post(f"/users/{account['id']}/unlock", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["is_active"] is True
    assert data["failed_login_attempts"] == 0
    assert data["locked_at"] is None

    response = await client.post(
        "/auth/login", json={"username": "jdoe", "password": account["password"]}
    )
    assert response.status_code == 200

    # Unlocking a healthy account is a no-op
    response = await client.post(f"/users/{account['id']}/unlock", headers=admin_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_role_change_reaches_live_session(client: AsyncClient, seed_user, login_as):
    admin_headers = await login_as(await seed_user("admin"))
    account = await seed_user("staff")
    user_headers = await login_as(account)

    response = await client.put(
        f"/users/{account['id']}/role",
        json={"new_role": "Organization"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["role"] == "organization"

    response = await client.get("/auth/me", headers=user_headers)
    assert response.json()["session"]["role"] == "organization"

    response = await client.get("/navigation", headers=user_headers)
    assert response.json()["dashboard"] == "/orgdashboard"


@pytest.mark.asyncio
async def test_administrator_cannot_demote_self(client: AsyncClient, seed_user, login_as):
    admin = await seed_user("admin")
    headers = await login_as(admin)

    response = await client.put(
        f"/users/{admin['id']}/role", json={"new_role": "user"}, headers=headers
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "CANNOT_DEMOTE_SELF"


@pytest.mark.asyncio
async def test_deactivation_ends_live_sessions(client: AsyncClient, seed_user, login_as):
    admin_headers = await login_as(await seed_user("admin"))
    account = await seed_user("staff")
    user_headers = await login_as(account)

    response = await client.post(f"/users/{account['id']}/deactivate", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.get("/auth/me", headers=user_headers)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "SESSION_EXPIRED"

    response = await client.post(
        "/auth/login", json={"username": "jdoe", "password": account["password"]}
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_INACTIVE"


@pytest.mark.asyncio
async def test_administrator_resets_password(client: AsyncClient, seed_user, login_as):
    admin_headers = await login_as(await seed_user("admin"))
    account = await seed_user("staff")

    response = await client.put(
        f"/users/{account['id']}/password",
        json={"new_password": "ResetByAdmin1"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.post(
        "/auth/login", json={"username": "jdoe", "password": account["password"]}
    )
    assert response.status_code == 401

    response = await client.post(
        "/auth/login", json={"username": "jdoe", "password": "ResetByAdmin1"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unknown_account_is_not_found(client: AsyncClient, seed_user, login_as):
    headers = await login_as(await seed_user("admin"))

    response = await client.post(
        "/users/00000000-0000-0000-0000-000000000000/temporary-password", headers=headers
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ACCOUNT_NOT_FOUND"


@pytest.mark.asyncio
async def test_passwords_beyond_bcrypt_limit_are_rejected(
    client: AsyncClient, seed_user, login_as
):
    headers = await login_as(await seed_user("admin"))
    account = await seed_user("staff")
    too_long = "x" * 80

    response = await client.post(
        "/users", json={"username": "mlee", "password": too_long}, headers=headers
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_FAILED"

    response = await client.put(
        f"/users/{account['id']}/password", json={"new_password": too_long}, headers=headers
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_reset_lifts_password_change_gate(client: AsyncClient, seed_user, login_as):
    """
    Given a user logged in with a temporary password
    When an administrator resets the password
    Then the user's live session no longer requires a password change
    """
    admin_headers = await login_as(await seed_user("admin"))
    account = await seed_user("staff")
    response = await client.post(
        f"/users/{account['id']}/temporary-password", headers=admin_headers
    )
    temporary = response.json()["temporary_password"]
    headers = await login_as({"username": "jdoe", "password": temporary})

    response = await client.get("/navigation", headers=headers)
    assert response.json()["error"]["code"] == "PASSWORD_CHANGE_REQUIRED"

    response = await client.put(
        f"/users/{account['id']}/password",
        json={"new_password": "ResetByAdmin1"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.get("/auth/me", headers=headers)
    assert response.json()["state"] == "authenticated"
    assert response.json()["session"]["password_change_required"] is False

    response = await client.get("/navigation", headers=headers)
    assert response.status_code == 200
