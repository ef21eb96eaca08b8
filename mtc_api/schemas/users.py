"""User and authentication schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    skills: List[str] = Field(default_factory=list)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)

    @field_validator("skills", mode="before")
    @classmethod
    def null_skills_are_empty(cls, value: Optional[list]) -> list:
        return [] if value is None else value


class LoginRequest(CamelModel):
    # Any identifier is looked up as-is; a non-address simply matches no user.
    email: str = Field(min_length=1)
    password: str


class SkillsUpdateRequest(CamelModel):
    skills: List[str]


class PasswordUpdateRequest(CamelModel):
    new_password: str = Field(min_length=1)

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserRead(CamelModel):
    """User as listed to admins. The password hash never leaves the store."""
    id: str
    email: str
    name: str
    location: str
    skills: List[str]
    is_admin: bool
    joined_at: datetime


class UserProfile(UserRead):
    """User plus the ids of the projects they joined."""
    projects: List[str] = Field(default_factory=list)


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserProfile
