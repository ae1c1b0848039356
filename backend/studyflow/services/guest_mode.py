"""Guest-mode gate.

The flag lives on the client as a cookie and never reaches the backend's
authorization; it only picks which workflow variant the HTTP edge requests.
"""
from __future__ import annotations

from fastapi import Request, Response

from studyflow.core.config import settings
from studyflow.services.routine_submission import AUTHENTICATED, GUEST, Mode

GUEST_FLAG_VALUE = "true"


def is_guest(request: Request) -> bool:
    return request.cookies.get(settings.guest_cookie_name) == GUEST_FLAG_VALUE


def enable_guest_mode(response: Response) -> None:
    response.set_cookie(settings.guest_cookie_name, GUEST_FLAG_VALUE, httponly=False, samesite="lax")


def clear_guest_mode(response: Response) -> None:
    response.delete_cookie(settings.guest_cookie_name)


def resolve_mode(request: Request, requested: Mode | None = None) -> Mode:
    """An explicit mode wins; otherwise the cookie decides."""
    if requested is not None:
        return requested
    return GUEST if is_guest(request) else AUTHENTICATED
