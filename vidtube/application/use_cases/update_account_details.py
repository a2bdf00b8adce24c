from __future__ import annotations

from vidtube.application.dto.account import UpdateAccountInput
from vidtube.application.dto.auth import AuthUserOutput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.validation import validate_account_details
from vidtube.domain.entities.user import UserPatch
from vidtube.domain.exceptions import ConflictError, NotFoundError

from .auth_common import build_auth_user_output


class UpdateAccountDetailsUseCase:
    def __init__(self, *, store: CredentialStorePort, clock: ClockPort):
        self._store = store
        self._clock = clock

    def execute(self, command: UpdateAccountInput) -> AuthUserOutput:
        valid = validate_account_details(command)

        owner = self._store.find_by_username_or_email(username=None, email=valid.email)
        if owner is not None and owner.id != valid.user_id:
            raise ConflictError("Email is already in use")

        user = self._store.update_by_id(
            user_id=valid.user_id,
            patch=UserPatch(full_name=valid.full_name, email=valid.email),
            updated_at=self._clock.now(),
        )
        if user is None:
            raise NotFoundError("User not found")
        return build_auth_user_output(user)
