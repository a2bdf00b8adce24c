from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from vidtube.application.dto.auth import AccessTokenPayload, RefreshTokenPayload
from vidtube.application.ports.token_port import TokenPort
from vidtube.domain.entities.user import User
from vidtube.domain.exceptions import InvalidTokenError, TokenConfigurationError


ALGORITHM = "HS256"

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Expiry is checked against the caller's clock, not PyJWT's wall clock.
_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_iat": False,
    "require": ["exp", "iat", "_id", "type"],
}


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl_minutes: int,
        refresh_ttl_days: int,
    ):
        if not access_secret or not refresh_secret:
            raise TokenConfigurationError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET are required.")
        if access_secret == refresh_secret:
            raise TokenConfigurationError("Access and refresh token secrets must differ.")
        if access_ttl_minutes <= 0 or refresh_ttl_days <= 0:
            raise TokenConfigurationError("Token lifetimes must be positive.")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl_minutes = access_ttl_minutes
        self._refresh_ttl_days = refresh_ttl_days

    def create_access_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(minutes=self._access_ttl_minutes)
        payload = {
            "_id": user.id,
            "email": user.email,
            "username": user.username,
            "fullName": user.full_name,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._access_secret, algorithm=ALGORITHM), exp

    def create_refresh_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(days=self._refresh_ttl_days)
        payload = {
            "_id": user_id,
            "type": REFRESH_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._refresh_secret, algorithm=ALGORITHM), exp

    def decode_access_token(self, *, token: str, now: datetime) -> AccessTokenPayload:
        payload = self._decode(
            token,
            secret=self._access_secret,
            expected_type=ACCESS_TOKEN_TYPE,
            now=now,
            error_message="Invalid access token",
        )
        return AccessTokenPayload(
            user_id=payload["_id"],
            email=str(payload.get("email") or ""),
            username=str(payload.get("username") or ""),
            full_name=str(payload.get("fullName") or ""),
        )

    def decode_refresh_token(self, *, token: str, now: datetime) -> RefreshTokenPayload:
        payload = self._decode(
            token,
            secret=self._refresh_secret,
            expected_type=REFRESH_TOKEN_TYPE,
            now=now,
            error_message="Invalid refresh token",
        )
        return RefreshTokenPayload(user_id=payload["_id"])

    @staticmethod
    def _decode(
        token: str,
        *,
        secret: str,
        expected_type: str,
        now: datetime,
        error_message: str,
    ) -> dict[str, Any]:
        try:
            payload = jwt.decode(token, secret, algorithms=[ALGORITHM], options=_DECODE_OPTIONS)
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(error_message) from exc

        if payload.get("type") != expected_type:
            raise InvalidTokenError(error_message)

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= now.timestamp():
            raise InvalidTokenError(error_message)

        user_id = payload.get("_id")
        if not user_id or not isinstance(user_id, str):
            raise InvalidTokenError(error_message)
        return payload
