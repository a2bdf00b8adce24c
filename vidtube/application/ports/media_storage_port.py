from __future__ import annotations

from typing import Protocol

from vidtube.application.dto.account import MediaUploadResult


class MediaStoragePort(Protocol):
    def upload(self, *, filename: str, content: bytes, content_type: str | None) -> MediaUploadResult:
        ...

    def remove(self, *, public_id: str) -> bool:
        ...
