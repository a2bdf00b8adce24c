from __future__ import annotations

import logging
from uuid import uuid4

from vidtube.application.dto.auth import RegisterUserInput, RegisterUserOutput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.password_hasher_port import PasswordHasherPort
from vidtube.application.validation import validate_registration
from vidtube.domain.exceptions import ConflictError

from .auth_common import build_auth_user_output


logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        store: CredentialStorePort,
        password_hasher: PasswordHasherPort,
        clock: ClockPort,
    ):
        self._store = store
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, command: RegisterUserInput) -> RegisterUserOutput:
        valid = validate_registration(command)

        existing = self._store.find_by_username_or_email(username=valid.username, email=valid.email)
        if existing is not None:
            raise ConflictError("User with email or username already exists")

        user = self._store.create_user(
            user_id=uuid4().hex,
            username=valid.username,
            email=valid.email,
            full_name=valid.full_name,
            password_hash=self._password_hasher.hash(valid.password),
            created_at=self._clock.now(),
        )
        logger.info("register_user: created user_id=%s", user.id)
        return RegisterUserOutput(user=build_auth_user_output(user))
