"""Session store interface."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
from uuid import UUID

logger = logging.getLogger(__name__)

NETWORK_ERROR_MARKERS = ("Failed to fetch", "Network")


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass
class AuthUser:
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None


@dataclass
class AuthSession:
    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None


AuthObserver = Callable[[AuthEvent, Optional[AuthSession]], None]


def is_network_error(message: str | None) -> bool:
    """Transport-level failures are treated as "no user", not as hard errors."""
    text = message or ""
    return any(marker in text for marker in NETWORK_ERROR_MARKERS)


class SessionStore:
    """Base interface for session store providers.

    The workflow only ever polls `current_session()` / `get_user()`; observers
    are for callers that want sign-in and sign-out notifications.
    """

    def __init__(self) -> None:
        self._observers: List[AuthObserver] = []

    def current_session(self) -> AuthSession | None:
        raise NotImplementedError

    def get_user(self) -> AuthUser | None:
        raise NotImplementedError

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError

    def sign_up(self, email: str, password: str, name: str | None = None) -> AuthUser:
        raise NotImplementedError

    def sign_out(self) -> None:
        raise NotImplementedError

    def subscribe(self, observer: AuthObserver) -> Callable[[], None]:
        """Register an observer; returns a callable that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        for observer in list(self._observers):
            try:
                observer(event, session)
            except Exception:
                logger.exception("Auth observer failed for %s", event.value)
