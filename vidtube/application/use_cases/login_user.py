from __future__ import annotations

import logging

from vidtube.application.dto.auth import AuthTokensOutput, LoginInput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.password_hasher_port import PasswordHasherPort
from vidtube.application.ports.token_port import TokenPort
from vidtube.application.validation import validate_login
from vidtube.domain.exceptions import InvalidCredentialsError

from .auth_common import issue_tokens


logger = logging.getLogger(__name__)


class LoginUserUseCase:
    def __init__(
        self,
        *,
        store: CredentialStorePort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
        clock: ClockPort,
    ):
        self._store = store
        self._password_hasher = password_hasher
        self._token_port = token_port
        self._clock = clock

    def execute(self, command: LoginInput) -> AuthTokensOutput:
        valid = validate_login(command)

        user = self._store.find_by_username_or_email(username=valid.username, email=valid.email)
        if user is None:
            logger.info("login_user: rejected reason=unknown_user")
            raise InvalidCredentialsError("Invalid user credentials")

        if not self._password_hasher.verify(valid.password, user.password_hash):
            logger.info("login_user: rejected reason=bad_password user_id=%s", user.id)
            raise InvalidCredentialsError("Invalid user credentials")

        output = issue_tokens(
            user=user,
            store=self._store,
            token_port=self._token_port,
            clock=self._clock,
        )
        logger.info("login_user: issued_tokens user_id=%s", user.id)
        return output
