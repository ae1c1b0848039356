"""Session store backed by the hosted GoTrue auth API."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

import httpx

from studyflow.core.errors import AuthenticationError, AuthServiceError
from studyflow.services.auth.base import AuthEvent, AuthSession, AuthUser, SessionStore, is_network_error

logger = logging.getLogger(__name__)


class SupabaseSessionStore(SessionStore):
    """GoTrue REST client bound to one caller's access token."""

    def __init__(self, http: httpx.Client, access_token: str | None = None) -> None:
        super().__init__()
        self._http = http
        self._access_token = access_token
        self._user: AuthUser | None = None

    def current_session(self) -> AuthSession | None:
        if not self._access_token:
            return None
        user = self.get_user()
        if user is None:
            return None
        return AuthSession(access_token=self._access_token, user=user)

    def get_user(self) -> AuthUser | None:
        if not self._access_token:
            return None
        if self._user is not None:
            return self._user

        try:
            response = self._http.get("/auth/v1/user", headers=self._bearer())
        except httpx.TransportError as exc:
            logger.warning("Network error while fetching user (ignored): %s", exc)
            return None

        if response.status_code in (401, 403):
            return None
        if response.is_error:
            message = _error_message(response)
            if is_network_error(message):
                logger.warning("Network error while fetching user (ignored): %s", message)
                return None
            logger.error("Error getting user: %s", message)
            raise AuthenticationError(f"Error getting user: {message}")

        self._user = _parse_user(response.json())
        return self._user

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        try:
            response = self._http.post(
                "/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except httpx.TransportError as exc:
            logger.error("Sign-in request failed: %s", exc)
            raise AuthServiceError(
                "Unexpected error while signing in",
                "Check that the session store is configured correctly.",
            ) from exc

        if response.is_error:
            message = _error_message(response)
            if message == "Invalid login credentials":
                raise AuthServiceError(
                    "Incorrect email or password",
                    "Check your credentials or create an account if you do not have one yet.",
                    response.status_code,
                )
            if "Email not confirmed" in message:
                raise AuthServiceError(
                    "Email not confirmed",
                    "Check your inbox to confirm your account.",
                    response.status_code,
                )
            raise AuthServiceError("Could not sign in", message, response.status_code)

        session = _parse_session(response.json())
        self._access_token = session.access_token
        self._user = session.user
        self._emit(AuthEvent.SIGNED_IN, session)
        return session

    def sign_up(self, email: str, password: str, name: str | None = None) -> AuthUser:
        try:
            response = self._http.post(
                "/auth/v1/signup",
                json={"email": email, "password": password, "data": {"name": name}},
            )
        except httpx.TransportError as exc:
            logger.error("Sign-up request failed: %s", exc)
            raise AuthServiceError(
                "Unexpected error while creating the account",
                "Check that the session store is configured correctly.",
            ) from exc

        if response.is_error:
            message = _error_message(response)
            if "already registered" in message:
                raise AuthServiceError(
                    "This email is already registered",
                    "Try signing in or use another email.",
                    response.status_code,
                )
            raise AuthServiceError("Could not create account", message, response.status_code)

        payload = response.json()
        # Autoconfirm projects answer with a session; others with the bare user.
        return _parse_user(payload.get("user") or payload)

    def sign_out(self) -> None:
        if not self._access_token:
            self._emit(AuthEvent.SIGNED_OUT, None)
            return
        try:
            response = self._http.post("/auth/v1/logout", headers=self._bearer())
        except httpx.TransportError as exc:
            logger.error("Error signing out: %s", exc)
            raise AuthServiceError("Could not sign out", str(exc)) from exc
        if response.is_error and response.status_code not in (401, 403):
            message = _error_message(response)
            logger.error("Error signing out: %s", message)
            raise AuthServiceError("Could not sign out", message, response.status_code)

        self._access_token = None
        self._user = None
        self._emit(AuthEvent.SIGNED_OUT, None)

    def _bearer(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}


def build_http_client(base_url: str, anon_key: str, timeout: float) -> httpx.Client:
    return httpx.Client(
        base_url=base_url.rstrip("/"),
        headers={"apikey": anon_key, "x-application-name": "study-flow"},
        timeout=timeout,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if not isinstance(payload, dict):
        return str(payload)
    for key in ("msg", "error_description", "message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return f"HTTP {response.status_code}"


def _parse_user(payload: Dict[str, Any]) -> AuthUser:
    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        id=UUID(str(payload["id"])),
        email=payload.get("email"),
        name=metadata.get("name"),
    )


def _parse_session(payload: Dict[str, Any]) -> AuthSession:
    expires_at = payload.get("expires_at")
    return AuthSession(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token"),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
        user=_parse_user(payload["user"]),
    )
