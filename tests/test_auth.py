"""Tests for the Google login flow, /auth/user and logout."""

from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from finance_api.db.models import User, UserSession
from finance_api.main import create_app
from finance_api.services.google_oauth import AuthFailure, GoogleOAuthClient, GoogleProfile

from conftest import create_user, open_session


def start_login(client):
    """Hit /auth/google and return the state sent to the provider."""
    resp = client.get("/auth/google", follow_redirects=False)
    assert resp.status_code == 302
    return parse_qs(urlparse(resp.headers["location"]).query)["state"][0]


def finish_login(client, code, state):
    return client.get(
        "/auth/google/callback", params={"code": code, "state": state}, follow_redirects=False
    )


def count_users(db_session):
    return db_session.execute(select(func.count()).select_from(User)).scalar_one()


def test_first_login_provisions_account(client, identity_provider, settings, db_session):
    identity_provider.results["code-1"] = GoogleProfile(
        "g-123", "Ana Souza", "ana@example.com", "https://img.example/ana.png"
    )
    state = start_login(client)

    resp = finish_login(client, "code-1", state)

    assert resp.status_code == 302
    assert resp.headers["location"] == settings.CLIENT_URL
    assert settings.SESSION_COOKIE_NAME in resp.cookies

    me = client.get("/auth/user")
    assert me.status_code == 200
    body = me.json()
    assert body["google_id"] == "g-123"
    assert body["nome"] == "Ana Souza"
    assert body["email"] == "ana@example.com"
    assert body["foto_url"] == "https://img.example/ana.png"
    assert count_users(db_session) == 1


def test_returning_login_reuses_account_without_sync(app, identity_provider, db_session):
    identity_provider.results["first"] = GoogleProfile("g-123", "Ana", "ana@example.com", None)
    identity_provider.results["second"] = GoogleProfile("g-123", "Ana Renamed", "new@example.com", "https://x")

    first = TestClient(app)
    finish_login(first, "first", start_login(first))
    first_id = first.get("/auth/user").json()["id"]

    second = TestClient(app)
    finish_login(second, "second", start_login(second))
    body = second.get("/auth/user").json()

    assert body["id"] == first_id
    assert body["nome"] == "Ana"
    assert body["email"] == "ana@example.com"
    assert count_users(db_session) == 1


def test_session_cookie_attributes(client, identity_provider, settings):
    identity_provider.results["code"] = GoogleProfile("g-1")
    resp = finish_login(client, "code", start_login(client))

    cookie = next(
        h for h in resp.headers.get_list("set-cookie") if h.startswith(settings.SESSION_COOKIE_NAME + "=")
    )
    assert "HttpOnly" in cookie
    assert "Max-Age=2592000" in cookie
    assert "Secure" not in cookie


def test_session_cookie_is_secure_in_production(database, identity_provider, settings):
    settings.ENVIRONMENT = "production"
    prod_client = TestClient(
        create_app(settings=settings, database=database, identity_provider=identity_provider),
        base_url="https://testserver",
    )
    identity_provider.results["code"] = GoogleProfile("g-1")
    state = start_login(prod_client)
    resp = finish_login(prod_client, "code", state)

    cookie = next(
        h for h in resp.headers.get_list("set-cookie") if h.startswith(settings.SESSION_COOKIE_NAME + "=")
    )
    assert "Secure" in cookie


def test_tampered_state_redirects_to_failure(client, identity_provider, settings, db_session):
    identity_provider.results["code"] = GoogleProfile("g-1")
    state = start_login(client)

    resp = finish_login(client, "code", state + "x")

    assert resp.status_code == 302
    assert resp.headers["location"] == settings.login_failure_url
    assert identity_provider.exchanges == []
    assert count_users(db_session) == 0


def test_callback_without_state_cookie_fails(app, client, identity_provider, settings):
    identity_provider.results["code"] = GoogleProfile("g-1")
    state = start_login(client)

    other_browser = TestClient(app)
    resp = finish_login(other_browser, "code", state)

    assert resp.headers["location"] == settings.login_failure_url


def test_provider_failure_redirects_to_failure(client, identity_provider, settings, db_session):
    identity_provider.results["code"] = AuthFailure("token endpoint returned 400")
    resp = finish_login(client, "code", start_login(client))

    assert resp.headers["location"] == settings.login_failure_url
    assert settings.SESSION_COOKIE_NAME not in resp.cookies
    assert count_users(db_session) == 0


def test_provider_error_param_redirects_to_failure(client, settings):
    start_login(client)
    resp = client.get("/auth/google/callback", params={"error": "access_denied"}, follow_redirects=False)
    assert resp.headers["location"] == settings.login_failure_url


def test_linking_failure_redirects_to_failure(client, identity_provider, settings, database):
    identity_provider.results["code"] = GoogleProfile("g-1")
    state = start_login(client)
    UserSession.__table__.drop(database.engine)
    User.__table__.drop(database.engine)

    resp = finish_login(client, "code", state)

    assert resp.status_code == 302
    assert resp.headers["location"] == settings.login_failure_url


def test_auth_user_returns_account(alice_client, alice_id):
    resp = alice_client.get("/auth/user")
    assert resp.status_code == 200
    assert resp.json() == {
        "id": alice_id,
        "google_id": "google-alice",
        "nome": "Alice",
        "email": "alice@example.com",
        "foto_url": None,
    }


def test_logout_is_idempotent(alice_client, settings):
    first = alice_client.get("/auth/logout", follow_redirects=False)
    second = alice_client.get("/auth/logout", follow_redirects=False)

    assert first.status_code == 302
    assert first.headers["location"] == settings.CLIENT_URL
    assert second.status_code == 302
    assert alice_client.get("/auth/user").status_code == 401


def test_logout_without_session(client, settings):
    resp = client.get("/auth/logout", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == settings.CLIENT_URL


def test_logout_only_ends_own_session(app, database, settings):
    user_id = create_user(database, "g-multi")
    laptop = TestClient(app, cookies={settings.SESSION_COOKIE_NAME: open_session(database, user_id)})
    phone = TestClient(app, cookies={settings.SESSION_COOKIE_NAME: open_session(database, user_id)})

    laptop.get("/auth/logout", follow_redirects=False)

    assert laptop.get("/auth/user").status_code == 401
    assert phone.get("/auth/user").status_code == 200


def test_login_redirects_to_provider_with_state_cookie(client):
    resp = client.get("/auth/google", follow_redirects=False)

    assert resp.status_code == 302
    query = parse_qs(urlparse(resp.headers["location"]).query)
    assert query["redirect_uri"] == ["http://testserver/auth/google/callback"]
    assert query["state"][0]
    state_cookie = next(h for h in resp.headers.get_list("set-cookie") if h.startswith("oauth_state="))
    assert "HttpOnly" in state_cookie


def test_default_identity_provider_is_google(settings, database):
    settings.GOOGLE_CLIENT_ID = "configured-client"
    default_app = create_app(settings=settings, database=database)

    provider = default_app.state.identity_provider
    assert isinstance(provider, GoogleOAuthClient)
    assert provider.client_id == "configured-client"
