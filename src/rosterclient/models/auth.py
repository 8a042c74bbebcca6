from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated coach profile returned by ``/auth/me``."""

    id: str | int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    name: str | None = None
    role: str | None = None
    phone: str | None = None
    avatar: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class LoginCredentials(BaseModel):
    email: str
    password: str


class RegisterData(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    role: Literal["head_coach", "assistant_coach"]
    phone: str | None = None


class ProfileUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str
