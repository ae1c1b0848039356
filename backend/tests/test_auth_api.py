from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from studyflow.api.deps import get_request_session_store
from studyflow.core.errors import AuthServiceError
from studyflow.main import app
from studyflow.services.auth.base import AuthSession, AuthUser, SessionStore
from studyflow.services.persistence.factory import get_persistence_store


class _FakeAuth(SessionStore):
    def __init__(self, user: AuthUser | None = None, error: AuthServiceError | None = None):
        super().__init__()
        self.user = user
        self.error = error
        self.calls: list[tuple] = []

    def current_session(self):
        return None

    def get_user(self):
        return self.user

    def sign_up(self, email, password, name=None):
        self.calls.append(("sign_up", email, name))
        if self.error:
            raise self.error
        return AuthUser(id=uuid4(), email=email, name=name)

    def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", email))
        if self.error:
            raise self.error
        return AuthSession(access_token="tok", refresh_token="ref", user=AuthUser(id=uuid4(), email=email))

    def sign_out(self):
        self.calls.append(("sign_out",))


@pytest.fixture()
def auth(make_store):
    fake = _FakeAuth()
    store = make_store()
    app.dependency_overrides[get_request_session_store] = lambda: fake
    app.dependency_overrides[get_persistence_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client, fake, store
    app.dependency_overrides.clear()


def test_signup_rejects_mismatched_passwords_before_calling_store(auth) -> None:
    client, fake, _ = auth
    response = client.post(
        "/auth/signup",
        json={"email": "ana@example.com", "password": "secret1", "confirm_password": "secret2"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Passwords do not match"
    assert fake.calls == []


def test_signup_rejects_short_password(auth) -> None:
    client, fake, _ = auth
    response = client.post(
        "/auth/signup",
        json={"email": "ana@example.com", "password": "12345", "confirm_password": "12345"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "password"
    assert fake.calls == []


def test_signup_creates_account(auth) -> None:
    client, fake, store = auth
    response = client.post(
        "/auth/signup",
        json={"email": "ana@example.com", "password": "123456", "confirm_password": "123456", "name": "Ana"},
    )

    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Ana"
    assert store.profiles[0].email == "ana@example.com"
    assert fake.calls == [("sign_up", "ana@example.com", "Ana")]


def test_signup_duplicate_email_reports_title(auth) -> None:
    client, fake, _ = auth
    fake.error = AuthServiceError("This email is already registered", "Try signing in or use another email.", 422)

    response = client.post(
        "/auth/signup",
        json={"email": "ana@example.com", "password": "123456", "confirm_password": "123456"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["title"] == "This email is already registered"


def test_login_records_profile_and_clears_guest_cookie(auth) -> None:
    client, _, store = auth
    client.cookies.set("guestMode", "true")

    response = client.post("/auth/login", json={"email": "ana@example.com", "password": "123456"})

    assert response.status_code == 200
    assert response.json()["access_token"] == "tok"
    assert store.profiles[0].email == "ana@example.com"
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_login_wrong_credentials(auth) -> None:
    client, fake, store = auth
    fake.error = AuthServiceError("Incorrect email or password", "Check your credentials.", 400)

    response = client.post("/auth/login", json={"email": "ana@example.com", "password": "nope"})

    assert response.status_code == 400
    assert response.json()["detail"]["title"] == "Incorrect email or password"
    assert store.profiles == []


def test_guest_mode_toggle_and_session_status(auth) -> None:
    client, fake, _ = auth

    assert client.get("/auth/session").json() == {"authenticated": False, "guest": False, "user": None}

    assert client.post("/auth/guest").status_code == 200
    assert client.get("/auth/session").json()["guest"] is True

    assert client.delete("/auth/guest").status_code == 200
    assert client.get("/auth/session").json()["guest"] is False

    fake.user = AuthUser(id=uuid4(), email="ana@example.com", name="Ana")
    status_payload = client.get("/auth/session").json()
    assert status_payload["authenticated"] is True
    assert status_payload["user"]["email"] == "ana@example.com"


def test_logout_signs_out(auth) -> None:
    client, fake, _ = auth

    response = client.post("/auth/logout", headers={"Authorization": "Bearer tok"})

    assert response.status_code == 200
    assert fake.calls == [("sign_out",)]
