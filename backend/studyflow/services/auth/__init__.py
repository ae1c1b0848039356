"""Session store capability and providers."""
from studyflow.services.auth.base import AuthEvent, AuthSession, AuthUser, SessionStore
from studyflow.services.auth.factory import get_session_store

__all__ = ["AuthEvent", "AuthSession", "AuthUser", "SessionStore", "get_session_store"]
