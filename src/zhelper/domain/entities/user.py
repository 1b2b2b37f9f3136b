from __future__ import annotations

from typing import Optional, Set

from pydantic import BaseModel, EmailStr, Field, field_validator

from zhelper.auth.models import ERole


class SignUpRequest(BaseModel):
    username: str = Field(min_length=3, max_length=150)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    roles: Optional[Set[str]] = None

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("roles")
    @classmethod
    def known_roles(cls, v):
        if v is None:
            return v
        unknown = set(v) - ERole.names()
        if unknown:
            raise ValueError(f"unknown roles: {sorted(unknown)}")
        return v


class SignInRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    roles: list[str]


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    roles: list[str]
    is_active: bool
    is_banned: bool
