from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.media_storage_port import MediaStoragePort
from vidtube.application.ports.password_hasher_port import PasswordHasherPort
from vidtube.application.ports.token_port import TokenPort
from vidtube.domain.exceptions import ConfigurationError
from vidtube.shared.config import Settings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """Collaborators built once at startup and handed to every request."""

    settings: Settings
    store: CredentialStorePort
    password_hasher: PasswordHasherPort
    token_service: TokenPort
    clock: ClockPort
    media_storage: MediaStoragePort | None = None
    closers: tuple[Callable[[], None], ...] = ()

    def close(self) -> None:
        for closer in self.closers:
            closer()


def build_container(settings: Settings) -> AppContainer:
    from vidtube.infrastructure.clients.media_storage_client import (
        HttpMediaStorageClient,
        MediaStorageClientSettings,
    )
    from vidtube.infrastructure.clock import SystemClock
    from vidtube.infrastructure.db.engine import build_engine, create_schema
    from vidtube.infrastructure.db.repositories.users_repository import SqlUsersRepository
    from vidtube.infrastructure.security.password_hasher import PasswordHasher
    from vidtube.infrastructure.security.token_service import JwtTokenService

    if not settings.database_url:
        raise ConfigurationError("DATABASE_URL is required.")

    token_service = JwtTokenService(
        access_secret=settings.access_token_secret,
        refresh_secret=settings.refresh_token_secret,
        access_ttl_minutes=settings.access_token_ttl_minutes,
        refresh_ttl_days=settings.refresh_token_ttl_days,
    )

    engine = build_engine(settings.database_url)
    create_schema(engine)

    closers: list[Callable[[], None]] = [engine.dispose]
    media_storage = None
    if settings.media_storage_url:
        media_storage = HttpMediaStorageClient(
            MediaStorageClientSettings(
                base_url=settings.media_storage_url,
                api_key=settings.media_storage_api_key,
                timeout_seconds=settings.media_storage_timeout_seconds,
            )
        )
        closers.append(media_storage.close)
    else:
        logger.warning("container: media_storage_not_configured image updates are disabled")

    return AppContainer(
        settings=settings,
        store=SqlUsersRepository(engine),
        password_hasher=PasswordHasher(),
        token_service=token_service,
        clock=SystemClock(),
        media_storage=media_storage,
        closers=tuple(closers),
    )
