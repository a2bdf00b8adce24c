from __future__ import annotations

import logging

from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort


logger = logging.getLogger(__name__)


class LogoutUserUseCase:
    def __init__(self, *, store: CredentialStorePort, clock: ClockPort):
        self._store = store
        self._clock = clock

    def execute(self, *, user_id: str) -> None:
        self._store.set_refresh_token(user_id=user_id, refresh_token=None, updated_at=self._clock.now())
        logger.info("logout_user: revoked_refresh_token user_id=%s", user_id)
