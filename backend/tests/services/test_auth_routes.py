"""Auth Routes — register, login, cookie sessions, password change."""

from app.core import messages

USER_PASSWORD = "Sekret123!"  # matches the seeded fixture users


def _register_body(**overrides) -> dict:
    data = {
        "first_name": "Marta",
        "last_name": "Kowalska",
        "email": "marta@example.com",
        "password": "Haslo123!",
        "confirm_password": "Haslo123!",
    }
    data.update(overrides)
    return data


async def test_register_creates_signer_and_sets_cookie(client):
    res = await client.post("/api/auth/register", json=_register_body())
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["user"]["role"] == "signer"
    assert data["user"]["email"] == "marta@example.com"
    assert data["session"]["token_type"] == "bearer"
    assert "access_token=" in res.headers["set-cookie"]


async def test_register_duplicate_email_conflicts(client, signer_user):
    res = await client.post(
        "/api/auth/register", json=_register_body(email="JAN@example.com"),
    )
    assert res.status_code == 409
    assert res.json()["message"] == messages.AUTH_EMAIL_TAKEN


async def test_register_validation_details(client):
    res = await client.post(
        "/api/auth/register",
        json=_register_body(password="slabe", confirm_password="inne"),
    )
    assert res.status_code == 400
    fields = {d["field"] for d in res.json()["details"]}
    assert "password" in fields


async def test_login_and_me_with_bearer(client, signer_user):
    res = await client.post(
        "/api/auth/login",
        json={"email": "jan@example.com", "password": USER_PASSWORD},
    )
    assert res.status_code == 200
    token = res.json()["data"]["session"]["access_token"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == str(signer_user.id)


async def test_cookie_session(client, signer_user):
    res = await client.post(
        "/api/auth/login",
        json={"email": "jan@example.com", "password": USER_PASSWORD},
    )
    client.cookies.set("access_token", res.json()["data"]["session"]["access_token"])
    me = await client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "jan@example.com"


async def test_login_wrong_password(client, signer_user):
    res = await client.post(
        "/api/auth/login", json={"email": "jan@example.com", "password": "Zle12345!"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == messages.AUTH_INVALID_CREDENTIALS


async def test_login_unknown_email_same_error(client):
    res = await client.post(
        "/api/auth/login", json={"email": "nikt@example.com", "password": "Zle12345!"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == messages.AUTH_INVALID_CREDENTIALS


async def test_login_disabled_by_feature_flag(client, feature_flags):
    feature_flags["auth"]["test"] = False
    res = await client.post(
        "/api/auth/login", json={"email": "jan@example.com", "password": USER_PASSWORD},
    )
    assert res.status_code == 503


async def test_logout_clears_cookie(client):
    res = await client.post("/api/auth/logout")
    assert res.status_code == 200
    assert res.json()["message"] == messages.AUTH_LOGOUT_OK
    assert 'access_token=""' in res.headers["set-cookie"]


async def test_change_password(client, signer_headers):
    res = await client.post(
        "/api/auth/change-password",
        json={"current_password": USER_PASSWORD, "new_password": "NoweHaslo9#"},
        headers=signer_headers,
    )
    assert res.status_code == 200

    login = await client.post(
        "/api/auth/login", json={"email": "jan@example.com", "password": "NoweHaslo9#"},
    )
    assert login.status_code == 200


async def test_change_password_wrong_current(client, signer_headers):
    res = await client.post(
        "/api/auth/change-password",
        json={"current_password": "Zle12345!", "new_password": "NoweHaslo9#"},
        headers=signer_headers,
    )
    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == "current_password"


async def test_me_requires_auth(client):
    assert (await client.get("/api/auth/me")).status_code == 401


async def test_login_redirect_depends_on_role(client, signer_user, admin_user):
    signer = await client.post(
        "/api/auth/login",
        json={"email": "jan@example.com", "password": USER_PASSWORD},
    )
    admin = await client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": USER_PASSWORD},
    )
    assert signer.json()["data"]["redirect_to"] == "/offers"
    assert admin.json()["data"]["redirect_to"] == "/admin"


async def test_login_honours_safe_redirect_only(client, signer_user):
    body = {"email": "jan@example.com", "password": USER_PASSWORD}
    res = await client.post(
        "/api/auth/login", json=body, params={"redirect": "/investments"},
    )
    assert res.json()["data"]["redirect_to"] == "/investments"

    res = await client.post(
        "/api/auth/login", json=body, params={"redirect": "//evil.example"},
    )
    assert res.json()["data"]["redirect_to"] == "/offers"


async def test_register_redirects_new_signer_to_offers(client):
    res = await client.post("/api/auth/register", json=_register_body())
    assert res.json()["data"]["redirect_to"] == "/offers"


async def test_page_access_for_visitor_and_signer(client, signer_headers):
    res = await client.get("/api/auth/access", params={"path": "/investments"})
    assert res.status_code == 200
    assert res.json()["data"] == {
        "path": "/investments",
        "allowed": False,
        "redirect_to": "/login?redirect=%2Finvestments",
    }

    res = await client.get(
        "/api/auth/access", params={"path": "/investments"}, headers=signer_headers,
    )
    assert res.json()["data"]["allowed"] is True
    assert res.json()["data"]["redirect_to"] is None

    res = await client.get(
        "/api/auth/access", params={"path": "/admin/offers"}, headers=signer_headers,
    )
    assert res.json()["data"]["redirect_to"] == "/unauthorized"


async def test_page_access_rejects_absolute_urls(client):
    res = await client.get(
        "/api/auth/access", params={"path": "https://evil.example"},
    )
    assert res.status_code == 400
