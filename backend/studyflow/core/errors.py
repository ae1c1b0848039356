"""Exception taxonomy shared by services and routes."""
from __future__ import annotations

from typing import Any, Dict, Optional

PERMISSION_DENIED = "42501"
FOREIGN_KEY_VIOLATION = "23503"

PERMISSION_REMEDIATION = (
    "Database permission error.\n"
    "To fix it:\n"
    "1. Run the schema migrations against the database (alembic upgrade head).\n"
    "2. Make sure the row-level security policies on routines, ai_analysis and "
    "study_sessions allow the signed-in user to insert their own rows.\n"
    "3. Retry the submission."
)


class StudyFlowError(Exception):
    """Base exception for the service."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationError(StudyFlowError):
    """Raised when no authenticated user is available."""

    def __init__(self, message: str = "User is not authenticated. Sign in to save your routine."):
        super().__init__(message)


class AuthServiceError(StudyFlowError):
    """The session store rejected a sign-in, sign-up or sign-out."""

    def __init__(self, title: str, message: str, status_code: int | None = None):
        super().__init__(message, {"title": title, "status_code": status_code})
        self.title = title
        self.status_code = status_code


class PersistenceError(StudyFlowError):
    """Raised when the persistence store refuses a read or write."""

    def __init__(self, message: str, code: str | None = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"code": code, **(details or {})})
        self.code = code


class PermissionDeniedError(PersistenceError):
    """Row-level security or grants refused the statement (SQLSTATE 42501)."""

    def __init__(self, store_message: str):
        super().__init__(
            f"{PERMISSION_REMEDIATION}\n\nTechnical details: {store_message}",
            code=PERMISSION_DENIED,
            details={"store_message": store_message},
        )
        self.remediation = PERMISSION_REMEDIATION


class ForeignKeyViolationError(PersistenceError):
    """A referenced row is missing (SQLSTATE 23503)."""

    def __init__(self, store_message: str):
        super().__init__(
            "Database reference error. Check that the user exists.",
            code=FOREIGN_KEY_VIOLATION,
            details={"store_message": store_message},
        )


class InferenceError(StudyFlowError):
    """Raised when the inference service cannot produce a usable answer."""


class RoutineValidationError(StudyFlowError):
    """Input rejected before any network call."""

    def __init__(self, field: str, message: str):
        super().__init__(message, {"field": field})
        self.field = field
