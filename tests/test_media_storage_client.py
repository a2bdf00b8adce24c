from __future__ import annotations

import httpx
import pytest

from vidtube.domain.exceptions import MediaStorageError
from vidtube.infrastructure.clients.media_storage_client import (
    HttpMediaStorageClient,
    MediaStorageClientSettings,
)


def _make_client(handler) -> HttpMediaStorageClient:
    settings = MediaStorageClientSettings(
        base_url="https://media.example.com",
        api_key="media-key",
        timeout_seconds=5,
    )
    http = httpx.Client(base_url=settings.base_url, transport=httpx.MockTransport(handler))
    return HttpMediaStorageClient(settings, client=http)


def test_upload_posts_multipart_file_with_api_key():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = request.read()
        return httpx.Response(200, json={"url": "https://cdn.example.com/a.png", "publicId": "a"})

    result = _make_client(handler).upload(filename="a.png", content=b"png-bytes", content_type="image/png")

    assert result.url == "https://cdn.example.com/a.png"
    assert result.public_id == "a"
    assert seen["method"] == "POST"
    assert seen["path"] == "/upload"
    assert seen["auth"] == "Bearer media-key"
    assert b'name="file"; filename="a.png"' in seen["body"]
    assert b"png-bytes" in seen["body"]


def test_upload_error_status_raises():
    client = _make_client(lambda request: httpx.Response(503, json={"error": "down"}))

    with pytest.raises(MediaStorageError):
        client.upload(filename="a.png", content=b"x", content_type=None)


def test_upload_response_without_public_id_raises():
    client = _make_client(lambda request: httpx.Response(200, json={"url": "https://cdn.example.com/a.png"}))

    with pytest.raises(MediaStorageError):
        client.upload(filename="a.png", content=b"x", content_type="image/png")


def test_remove_reports_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        if request.url.path == "/files/known":
            return httpx.Response(204)
        return httpx.Response(404)

    client = _make_client(handler)

    assert client.remove(public_id="known") is True
    assert client.remove(public_id="unknown") is False
    assert client.remove(public_id="") is False


def test_remove_network_error_returns_false():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert _make_client(handler).remove(public_id="a") is False


def test_close_only_closes_a_client_it_created():
    settings = MediaStorageClientSettings(base_url="https://media.example.com", api_key="", timeout_seconds=5)
    owned = HttpMediaStorageClient(settings)
    shared_http = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    borrowed = HttpMediaStorageClient(settings, client=shared_http)

    owned.close()
    borrowed.close()

    assert owned._client.is_closed
    assert not shared_http.is_closed
    shared_http.close()
