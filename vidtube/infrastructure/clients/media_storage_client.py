from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from vidtube.application.dto.account import MediaUploadResult
from vidtube.application.ports.media_storage_port import MediaStoragePort
from vidtube.domain.exceptions import MediaStorageError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaStorageClientSettings:
    base_url: str
    api_key: str
    timeout_seconds: float


class HttpMediaStorageClient(MediaStoragePort):
    """Client for the object-storage service holding avatars and cover images.

    ``POST {base}/upload`` takes a multipart ``file`` and answers
    ``{"url": ..., "publicId": ...}``; ``DELETE {base}/files/{publicId}``
    removes a stored file.
    """

    def __init__(self, settings: MediaStorageClientSettings, *, client: httpx.Client | None = None):
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=settings.base_url.rstrip("/"),
            timeout=settings.timeout_seconds,
        )

    def upload(self, *, filename: str, content: bytes, content_type: str | None) -> MediaUploadResult:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        try:
            response = self._client.post("/upload", files=files, headers=self._headers())
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("media_storage_client: upload_failed filename=%s error=%s", filename, exc)
            raise MediaStorageError("Media upload failed.") from exc

        url = payload.get("url") if isinstance(payload, dict) else None
        public_id = payload.get("publicId") if isinstance(payload, dict) else None
        if not url or not public_id:
            raise MediaStorageError("Media storage response is missing url or publicId.")

        logger.info("media_storage_client: uploaded public_id=%s bytes=%s", public_id, len(content))
        return MediaUploadResult(url=str(url), public_id=str(public_id))

    def remove(self, *, public_id: str) -> bool:
        if not public_id:
            return False
        try:
            response = self._client.delete(f"/files/{public_id}", headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("media_storage_client: remove_failed public_id=%s error=%s", public_id, exc)
            return False
        if response.status_code >= 400:
            logger.warning(
                "media_storage_client: remove_rejected public_id=%s status=%s",
                public_id,
                response.status_code,
            )
            return False
        return True

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _headers(self) -> dict[str, str]:
        if not self._settings.api_key:
            return {}
        return {"Authorization": f"Bearer {self._settings.api_key}"}
