"""Session store used when no auth backend is configured."""
from __future__ import annotations

import logging

from studyflow.core.errors import AuthServiceError
from studyflow.services.auth.base import AuthEvent, AuthSession, AuthUser, SessionStore

logger = logging.getLogger(__name__)

NOT_CONFIGURED_TITLE = "Session store not configured"
NOT_CONFIGURED_HINT = "Set SUPABASE_URL and SUPABASE_ANON_KEY in the service environment."


class UnconfiguredSessionStore(SessionStore):
    """Nobody is ever signed in; sign-in and sign-up explain what is missing."""

    def current_session(self) -> AuthSession | None:
        return None

    def get_user(self) -> AuthUser | None:
        logger.warning("Session store not configured; treating caller as anonymous")
        return None

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        raise AuthServiceError(NOT_CONFIGURED_TITLE, NOT_CONFIGURED_HINT)

    def sign_up(self, email: str, password: str, name: str | None = None) -> AuthUser:
        raise AuthServiceError(NOT_CONFIGURED_TITLE, NOT_CONFIGURED_HINT)

    def sign_out(self) -> None:
        self._emit(AuthEvent.SIGNED_OUT, None)
