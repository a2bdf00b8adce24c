from __future__ import annotations

from datetime import datetime
from typing import Protocol

from vidtube.application.dto.auth import AccessTokenPayload, RefreshTokenPayload
from vidtube.domain.entities.user import User


class TokenPort(Protocol):
    def create_access_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        ...

    def create_refresh_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        ...

    def decode_access_token(self, *, token: str, now: datetime) -> AccessTokenPayload:
        ...

    def decode_refresh_token(self, *, token: str, now: datetime) -> RefreshTokenPayload:
        ...
