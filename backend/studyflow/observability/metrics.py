"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from studyflow.observability import tracing

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short Opik trace; silently skipped when Opik is off."""
    client = tracing.get_opik_client()
    if not client:
        return

    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)

    try:
        metric_trace = client.trace(name=f"metric:{name}", metadata=payload)
        metric_trace.end()
    except Exception as exc:  # pragma: no cover - SDK failure
        logger.debug("Unable to record metric %s: %s", name, exc)


def log_outcome(prefix: str, ok: bool, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Emit `<prefix>.success` or `<prefix>.failure` with value 1."""
    log_metric(f"{prefix}.{'success' if ok else 'failure'}", 1, metadata=metadata)
