from __future__ import annotations

import logging

from vidtube.application.dto.account import UpdateUserImageInput, UserImageKind
from vidtube.application.dto.auth import AuthUserOutput
from vidtube.application.ports.clock_port import ClockPort
from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.application.ports.media_storage_port import MediaStoragePort
from vidtube.domain.entities.user import UserPatch
from vidtube.domain.exceptions import InternalError, MediaStorageError, NotFoundError, ValidationError

from .auth_common import build_auth_user_output


logger = logging.getLogger(__name__)

_LABELS = {"avatar": "Avatar", "cover_image": "Cover image"}


class UpdateUserImageUseCase:
    """Replace the avatar or cover image of a user.

    The storage public id is saved next to the url, and the previous file is
    removed only after the record points at the new one.
    """

    def __init__(
        self,
        *,
        store: CredentialStorePort,
        media_storage: MediaStoragePort | None,
        clock: ClockPort,
        kind: UserImageKind,
    ):
        self._store = store
        self._media_storage = media_storage
        self._clock = clock
        self._kind = kind

    def execute(self, command: UpdateUserImageInput) -> AuthUserOutput:
        label = _LABELS[self._kind]
        if not command.content:
            raise ValidationError(f"{label} file is missing")
        if self._media_storage is None:
            raise InternalError("Media storage is not configured")

        user = self._store.find_by_id(user_id=command.user_id)
        if user is None:
            raise NotFoundError("User not found")

        try:
            uploaded = self._media_storage.upload(
                filename=command.filename,
                content=command.content,
                content_type=command.content_type,
            )
        except MediaStorageError as exc:
            logger.warning("update_user_image: upload_failed kind=%s user_id=%s", self._kind, user.id)
            raise InternalError(f"Error occurred while uploading {label.lower()}") from exc

        if self._kind == "avatar":
            previous_public_id = user.avatar_public_id
            patch = UserPatch(avatar_url=uploaded.url, avatar_public_id=uploaded.public_id)
        else:
            previous_public_id = user.cover_image_public_id
            patch = UserPatch(cover_image_url=uploaded.url, cover_image_public_id=uploaded.public_id)

        try:
            updated = self._store.update_by_id(user_id=user.id, patch=patch, updated_at=self._clock.now())
        except Exception:
            self._discard_upload(uploaded.public_id, user.id)
            raise
        if updated is None:
            self._discard_upload(uploaded.public_id, user.id)
            raise NotFoundError("User not found")

        if previous_public_id and not self._media_storage.remove(public_id=previous_public_id):
            logger.warning(
                "update_user_image: stale_file_not_removed kind=%s user_id=%s public_id=%s",
                self._kind,
                user.id,
                previous_public_id,
            )
        return build_auth_user_output(updated)

    def _discard_upload(self, public_id: str, user_id: str) -> None:
        if not self._media_storage.remove(public_id=public_id):
            logger.warning(
                "update_user_image: orphaned_upload kind=%s user_id=%s public_id=%s",
                self._kind,
                user_id,
                public_id,
            )
