"""Process-wide Opik client.

The client is built at most once per process. Settings are read on first use,
so tests can flip `opik_enabled` and call `reset_opik_client()`.
"""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from studyflow.core.config import settings

logger = logging.getLogger(__name__)

_lock = Lock()
_state: dict = {"client": None, "resolved": False}


def _build_client() -> Optional[Opik]:
    if not settings.opik_enabled:
        logger.debug("Opik disabled; submission and inference traces are no-ops")
        return None
    if not settings.opik_api_key:
        logger.warning("OPIK_ENABLED is set without OPIK_API_KEY; tracing stays off")
        return None
    try:
        client = Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
    except Exception as exc:  # pragma: no cover - SDK/network failure
        logger.warning("Opik client could not be created, tracing stays off: %s", exc)
        return None
    logger.info("Opik tracing on (project=%s)", settings.opik_project)
    return client


def init_opik() -> Optional[Opik]:
    """Resolve the client on first call; later calls return the same answer."""
    with _lock:
        if not _state["resolved"]:
            _state["client"] = _build_client()
            _state["resolved"] = True
        return _state["client"]


def get_opik_client() -> Optional[Opik]:
    return _state["client"] if _state["resolved"] else init_opik()


def flush_opik() -> None:
    """Push buffered traces before the process exits."""
    client = _state["client"]
    if client is None:
        return
    try:
        client.flush()
    except Exception:  # pragma: no cover - SDK/network failure
        logger.warning("Opik flush failed; some traces may be lost", exc_info=True)


def reset_opik_client() -> None:
    with _lock:
        _state["client"] = None
        _state["resolved"] = False
