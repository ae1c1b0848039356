"""Schemas for authentication endpoints."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str
    confirm_password: str
    name: Optional[str] = Field(None, max_length=200)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)


class UserPayload(BaseModel):
    id: UUID
    email: Optional[str]
    name: Optional[str]


class SignupResponse(BaseModel):
    user: UserPayload
    message: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str]
    user: UserPayload
    message: str


class SessionStatusResponse(BaseModel):
    authenticated: bool
    guest: bool
    user: Optional[UserPayload] = None


class MessageResponse(BaseModel):
    message: str
