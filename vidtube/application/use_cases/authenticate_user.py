from __future__ import annotations

from vidtube.application.dto.auth import AuthUserOutput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.token_port import TokenPort
from vidtube.domain.exceptions import InvalidTokenError, UnauthorizedError

from .auth_common import build_auth_user_output


class AuthenticateUserUseCase:
    """Resolve an access token to the user it was issued for. Never writes."""

    def __init__(self, *, store: CredentialStorePort, token_port: TokenPort, clock: ClockPort):
        self._store = store
        self._token_port = token_port
        self._clock = clock

    def execute(self, *, token: str | None) -> AuthUserOutput:
        token = (token or "").strip()
        if not token:
            raise UnauthorizedError("Unauthorized request")

        payload = self._token_port.decode_access_token(token=token, now=self._clock.now())

        user = self._store.find_by_id(user_id=payload.user_id)
        if user is None:
            raise InvalidTokenError("Invalid access token")
        return build_auth_user_output(user)
