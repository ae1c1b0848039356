"""Shared FastAPI dependencies and error mapping for the HTTP edge."""
from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, status

from studyflow.core.context import bind_user_id
from studyflow.core.errors import (
    AuthenticationError,
    AuthServiceError,
    ForeignKeyViolationError,
    InferenceError,
    PermissionDeniedError,
    RoutineValidationError,
    StudyFlowError,
)
from studyflow.services.auth import AuthUser, SessionStore, get_session_store

logger = logging.getLogger(__name__)


def get_access_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the bearer token, if any, from the Authorization header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_request_session_store(access_token: str | None = Depends(get_access_token)) -> SessionStore:
    return get_session_store(access_token)


def require_user(session_store: SessionStore = Depends(get_request_session_store)) -> AuthUser:
    try:
        user = session_store.get_user()
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=AuthenticationError().message)
    bind_user_id(user.id)
    return user


def status_for(error: StudyFlowError) -> int:
    if isinstance(error, RoutineValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(error, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(error, ForeignKeyViolationError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, InferenceError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(error, AuthServiceError):
        return error.status_code or status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(error: StudyFlowError, **extra: object) -> HTTPException:
    """Turn a service error into an HTTPException carrying its message and details."""
    detail = {"message": error.message, **{k: v for k, v in error.details.items() if v is not None}, **extra}
    return HTTPException(status_code=status_for(error), detail=detail)
