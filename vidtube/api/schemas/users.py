from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from vidtube.application.dto.auth import AuthUserOutput


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    full_name: str | None = None
    password: str | None = None


class LoginRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class RefreshTokenRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str | None = None
    new_password: str | None = None
    confirm_new_password: str | None = None


class UpdateAccountRequest(CamelModel):
    full_name: str | None = None
    email: str | None = None


class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: str | None = None
    cover_image: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_output(cls, user: AuthUserOutput) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar_url,
            cover_image=user.cover_image_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str


class TokenPairResponse(CamelModel):
    access_token: str
    refresh_token: str


class EmptyResponse(CamelModel):
    pass


class HealthcheckResponse(CamelModel):
    status: str
