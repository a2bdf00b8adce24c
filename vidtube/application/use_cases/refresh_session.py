from __future__ import annotations

import logging

from vidtube.application.dto.auth import AuthTokensOutput, RefreshSessionInput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.token_port import TokenPort
from vidtube.domain.exceptions import InvalidTokenError, TokenExpiredError, UnauthorizedError

from .auth_common import issue_tokens


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    """Exchange the current refresh token for a new pair.

    A refresh token is redeemable only while it equals the value stored on the
    user; every successful exchange overwrites that value, so each token works
    at most once. With ``strict_rotation`` the overwrite is conditional on the
    stored value being unchanged, which closes the window where two concurrent
    requests both redeem the same token.
    """

    def __init__(
        self,
        *,
        store: CredentialStorePort,
        token_port: TokenPort,
        clock: ClockPort,
        strict_rotation: bool = False,
    ):
        self._store = store
        self._token_port = token_port
        self._clock = clock
        self._strict_rotation = strict_rotation

    def execute(self, command: RefreshSessionInput) -> AuthTokensOutput:
        token = (command.refresh_token or "").strip()
        if not token:
            raise UnauthorizedError("Unauthorized request")

        payload = self._token_port.decode_refresh_token(token=token, now=self._clock.now())

        user = self._store.find_by_id(user_id=payload.user_id)
        if user is None:
            raise InvalidTokenError("Invalid refresh token")

        if not user.refresh_token or token != user.refresh_token:
            logger.info("refresh_session: superseded_token user_id=%s", user.id)
            raise TokenExpiredError("Refresh token is expired or used")

        output = issue_tokens(
            user=user,
            store=self._store,
            token_port=self._token_port,
            clock=self._clock,
            expected_refresh_token=token if self._strict_rotation else None,
        )
        logger.info("refresh_session: rotated user_id=%s", user.id)
        return output
