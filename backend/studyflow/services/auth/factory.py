"""Session store factory."""
from __future__ import annotations

from functools import lru_cache

import httpx

from studyflow.core.config import settings
from studyflow.services.auth.base import SessionStore
from studyflow.services.auth.noop import UnconfiguredSessionStore
from studyflow.services.auth.supabase import SupabaseSessionStore, build_http_client


@lru_cache
def _shared_http_client() -> httpx.Client:
    return build_http_client(settings.supabase_url or "", settings.supabase_anon_key or "", settings.auth_timeout_seconds)


def get_session_store(access_token: str | None = None) -> SessionStore:
    """Return a session store bound to the caller's access token."""
    if not settings.auth_configured:
        return UnconfiguredSessionStore()
    return SupabaseSessionStore(_shared_http_client(), access_token)


def close_session_stores() -> None:
    """Close the pooled auth HTTP client; the next store builds a fresh one."""
    if _shared_http_client.cache_info().currsize:
        _shared_http_client().close()
    _shared_http_client.cache_clear()
