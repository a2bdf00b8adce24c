from __future__ import annotations

import logging

from vidtube.application.dto.auth import AuthTokensOutput, AuthUserOutput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.token_port import TokenPort
from vidtube.domain.entities.user import User
from vidtube.domain.exceptions import InternalError, TokenExpiredError


logger = logging.getLogger(__name__)


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        cover_image_url=user.cover_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def issue_tokens(
    *,
    user: User,
    store: CredentialStorePort,
    token_port: TokenPort,
    clock: ClockPort,
    expected_refresh_token: str | None = None,
) -> AuthTokensOutput:
    """Mint an access/refresh pair and persist the refresh token before returning it.

    With ``expected_refresh_token`` the write only happens while the stored
    value still equals it; losing that race raises ``TokenExpiredError``.
    Without it the write is a plain overwrite.
    """
    now = clock.now()
    access_token, access_expires_at = token_port.create_access_token(user=user, now=now)
    refresh_token, refresh_expires_at = token_port.create_refresh_token(user_id=user.id, now=now)

    try:
        if expected_refresh_token is None:
            store.set_refresh_token(user_id=user.id, refresh_token=refresh_token, updated_at=now)
            rotated = True
        else:
            rotated = store.compare_and_set_refresh_token(
                user_id=user.id,
                expected=expected_refresh_token,
                refresh_token=refresh_token,
                updated_at=now,
            )
    except Exception as exc:
        logger.exception("auth: refresh_token_persist_failed user_id=%s", user.id)
        raise InternalError("Something went wrong while generating refresh and access token") from exc

    if not rotated:
        logger.info("auth: refresh_token_rotation_lost_race user_id=%s", user.id)
        raise TokenExpiredError("Refresh token is expired or used")

    return AuthTokensOutput(
        user=build_auth_user_output(user),
        access_token=access_token,
        refresh_token=refresh_token,
        access_expires_at=access_expires_at,
        refresh_expires_at=refresh_expires_at,
    )
