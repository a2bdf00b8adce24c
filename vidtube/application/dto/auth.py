from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    username: str
    email: str
    full_name: str
    avatar_url: str | None
    cover_image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RegisterUserInput:
    username: str | None
    email: str | None
    full_name: str | None
    password: str | None


@dataclass(frozen=True)
class RegisterUserOutput:
    user: AuthUserOutput


@dataclass(frozen=True)
class LoginInput:
    username: str | None
    email: str | None
    password: str | None


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str | None


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: str
    old_password: str | None
    new_password: str | None
    confirm_new_password: str | None


@dataclass(frozen=True)
class AuthTokensOutput:
    user: AuthUserOutput
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str
    email: str
    username: str
    full_name: str


@dataclass(frozen=True)
class RefreshTokenPayload:
    user_id: str
