from __future__ import annotations

import logging

from vidtube.application.dto.auth import ChangePasswordInput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.password_hasher_port import PasswordHasherPort
from vidtube.application.validation import validate_password_change
from vidtube.domain.entities.user import UserPatch
from vidtube.domain.exceptions import UnauthorizedError, ValidationError


logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
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

    def execute(self, command: ChangePasswordInput) -> None:
        valid = validate_password_change(command)

        user = self._store.find_by_id(user_id=valid.user_id)
        if user is None:
            raise UnauthorizedError("Unauthorized request")

        if not self._password_hasher.verify(valid.old_password, user.password_hash):
            raise ValidationError("Invalid old password")

        # Outstanding refresh tokens die with the old password.
        patch = UserPatch(
            password_hash=self._password_hasher.hash(valid.new_password),
            revoke_refresh_token=True,
        )
        self._store.update_by_id(user_id=user.id, patch=patch, updated_at=self._clock.now())
        logger.info("change_password: updated user_id=%s", user.id)
