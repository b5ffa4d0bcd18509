"""
Pydantic models for user data.

Passwords are accepted on registration and login only; ``UserRead``
never carries the password hash.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from . import APIModel


class UserCreate(APIModel):
    """Schema for registering a user."""

    name: str = Field(..., examples=["Jane Doe"])
    email: EmailStr = Field(..., examples=["jane@example.com"])
    password: str = Field(..., examples=["secret123"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


class UserLogin(APIModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def require_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UserSummary(APIModel):
    """Public view of a user, used for event organizers and attendees."""

    id: int
    name: str
    email: str


class UserRead(UserSummary):
    """Schema for reading the authenticated user's profile."""

    created_at: Optional[datetime] = None


class AuthResponse(APIModel):
    success: bool = True
    message: str
    token: str
    user: UserRead


class MeResponse(APIModel):
    success: bool = True
    user: UserRead
