"""Account and guest-mode routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from studyflow.api.deps import get_request_session_store, http_error
from studyflow.api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SessionStatusResponse,
    SignupRequest,
    SignupResponse,
    UserPayload,
)
from studyflow.core.errors import AuthenticationError, AuthServiceError, PersistenceError
from studyflow.observability.metrics import log_outcome
from studyflow.observability.tracing import trace
from studyflow.services.auth import AuthUser, SessionStore
from studyflow.services.guest_mode import clear_guest_mode, enable_guest_mode, is_guest
from studyflow.services.persistence import PersistenceStore
from studyflow.services.persistence.factory import get_persistence_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


def _user_payload(user: AuthUser) -> UserPayload:
    return UserPayload(id=user.id, email=user.email, name=user.name)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    session_store: SessionStore = Depends(get_request_session_store),
    store: PersistenceStore = Depends(get_persistence_store),
) -> SignupResponse:
    if payload.password != payload.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Passwords do not match", "field": "confirm_password"},
        )
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "field": "password"},
        )

    with trace("auth.signup"):
        try:
            user = session_store.sign_up(payload.email, payload.password, payload.name)
        except AuthServiceError as exc:
            log_outcome("auth.signup", False)
            raise http_error(exc) from exc

        try:
            store.ensure_profile(user)
        except PersistenceError as exc:
            raise http_error(exc) from exc

    log_outcome("auth.signup", True)
    return SignupResponse(
        user=_user_payload(user),
        message="Account created! Check your email to confirm your registration.",
    )


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    response: Response,
    session_store: SessionStore = Depends(get_request_session_store),
    store: PersistenceStore = Depends(get_persistence_store),
) -> LoginResponse:
    with trace("auth.login"):
        try:
            session = session_store.sign_in_with_password(payload.email, payload.password)
        except AuthServiceError as exc:
            log_outcome("auth.login", False)
            raise http_error(exc) from exc

        try:
            store.ensure_profile(session.user)
        except PersistenceError as exc:
            raise http_error(exc) from exc

    log_outcome("auth.login", True)
    clear_guest_mode(response)
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user=_user_payload(session.user),
        message="Signed in successfully!",
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    session_store: SessionStore = Depends(get_request_session_store),
) -> MessageResponse:
    try:
        session_store.sign_out()
    except AuthServiceError as exc:
        raise http_error(exc) from exc
    clear_guest_mode(response)
    return MessageResponse(message="Signed out")


@router.get("/session", response_model=SessionStatusResponse)
def get_session_status(
    request: Request,
    session_store: SessionStore = Depends(get_request_session_store),
) -> SessionStatusResponse:
    try:
        user = session_store.get_user()
    except AuthenticationError as exc:
        logger.warning("Session lookup failed: %s", exc.message)
        user = None
    return SessionStatusResponse(
        authenticated=user is not None,
        guest=is_guest(request),
        user=_user_payload(user) if user else None,
    )


@router.post("/guest", response_model=MessageResponse)
def start_guest_mode(response: Response) -> MessageResponse:
    enable_guest_mode(response)
    return MessageResponse(message="Guest mode enabled. Analyses will not be saved.")


@router.delete("/guest", response_model=MessageResponse)
def stop_guest_mode(response: Response) -> MessageResponse:
    clear_guest_mode(response)
    return MessageResponse(message="Guest mode disabled")
