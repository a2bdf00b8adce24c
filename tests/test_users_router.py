from __future__ import annotations

from fastapi.testclient import TestClient

from tests.fakes import (
    FakeCredentialStore,
    FakeMediaStorage,
    FakePasswordHasher,
    FixedClock,
    make_settings,
    make_token_service,
)
from vidtube.api.container import AppContainer
from vidtube.main import create_app


class ExplodingStore(FakeCredentialStore):
    def find_by_username_or_email(self, *, username, email):
        raise RuntimeError("database is gone")


def _client(*, store=None, media_storage=None, **kwargs) -> TestClient:
    container = AppContainer(
        settings=make_settings(),
        store=store or FakeCredentialStore(),
        password_hasher=FakePasswordHasher(),
        token_service=make_token_service(),
        clock=FixedClock(),
        media_storage=media_storage,
    )
    return TestClient(create_app(container=container), base_url="https://testserver", **kwargs)


def _register_and_login(client: TestClient) -> dict:
    register = client.post(
        "/api/v1/users/register",
        json={"username": "alice", "email": "alice@x.com", "fullName": "Alice Doe", "password": "pw12345678"},
    )
    assert register.status_code == 201
    login = client.post("/api/v1/users/login", json={"username": "alice", "password": "pw12345678"})
    assert login.status_code == 200
    return login.json()["data"]


def test_healthcheck():
    response = _client().get("/api/v1/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"statusCode": 200, "data": {"status": "ok"}, "message": "OK", "success": True}


def test_register_returns_user_without_secrets():
    client = _client()

    response = client.post(
        "/api/v1/users/register",
        json={"username": "Alice", "email": "alice@x.com", "fullName": "Alice Doe", "password": "pw12345678"},
    )

    body = response.json()
    assert response.status_code == 201
    assert body["success"] is True
    assert body["statusCode"] == 201
    assert body["data"]["username"] == "alice"
    assert body["data"]["fullName"] == "Alice Doe"
    assert body["data"]["avatar"] is None
    assert "passwordHash" not in body["data"]
    assert "refreshToken" not in body["data"]


def test_register_duplicate_is_conflict():
    client = _client()
    payload = {"username": "alice", "email": "alice@x.com", "fullName": "Alice Doe", "password": "pw12345678"}
    client.post("/api/v1/users/register", json=payload)

    response = client.post("/api/v1/users/register", json=payload)

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_register_with_missing_fields_lists_errors():
    response = _client().post("/api/v1/users/register", json={"username": "alice"})

    body = response.json()
    assert response.status_code == 400
    assert body["message"] == "All fields are required"
    assert "email is required" in body["errors"]
    assert body["data"] is None


def test_malformed_body_is_bad_request():
    response = _client().post("/api/v1/users/login", json={"username": 123, "password": "pw12345678"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


def test_login_sets_http_only_cookies_and_returns_tokens():
    client = _client()

    data = _register_and_login(client)

    assert data["user"]["username"] == "alice"
    assert data["accessToken"]
    assert data["refreshToken"]
    assert client.cookies.get("accessToken") == data["accessToken"]
    assert client.cookies.get("refreshToken") == data["refreshToken"]


def test_login_cookie_attributes():
    client = _client()
    client.post(
        "/api/v1/users/register",
        json={"username": "alice", "email": "alice@x.com", "fullName": "Alice Doe", "password": "pw12345678"},
    )

    response = client.post("/api/v1/users/login", json={"email": "alice@x.com", "password": "pw12345678"})

    set_cookies = response.headers.get_list("set-cookie")
    access = next(value for value in set_cookies if value.startswith("accessToken="))
    assert "HttpOnly" in access
    assert "Secure" in access
    assert "Max-Age=900" in access


def test_login_with_wrong_password_is_unauthorized():
    client = _client()
    _register_and_login(client)
    client.cookies.clear()

    response = client.post("/api/v1/users/login", json={"username": "alice", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid user credentials"
    assert "accessToken" not in response.headers.get("set-cookie", "")


def test_current_user_with_bearer_header():
    client = _client()
    data = _register_and_login(client)
    client.cookies.clear()

    response = client.get(
        "/api/v1/users/current-user",
        headers={"Authorization": f"Bearer {data['accessToken']}"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alice@x.com"


def test_cookie_takes_precedence_over_header():
    client = _client()
    _register_and_login(client)

    response = client.get("/api/v1/users/current-user", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 200


def test_current_user_without_token_is_unauthorized():
    response = _client().get("/api/v1/users/current-user")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request"


def test_token_signed_with_wrong_secret_is_rejected():
    client = _client()
    _register_and_login(client)
    client.cookies.clear()
    forger = make_token_service(access_secret="attacker-controlled-secret-0123456789")
    store_user = client.app.state.container.store.find_by_username_or_email(username="alice", email=None)
    forged, _ = forger.create_access_token(user=store_user, now=client.app.state.container.clock.now())

    response = client.get("/api/v1/users/current-user", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid access token"


def test_refresh_with_cookie_rotates_tokens():
    client = _client()
    data = _register_and_login(client)

    response = client.post("/api/v1/users/refresh-token")

    body = response.json()
    assert response.status_code == 200
    assert body["data"]["refreshToken"] != data["refreshToken"]
    assert client.cookies.get("refreshToken") == body["data"]["refreshToken"]


def test_refresh_with_body_token():
    client = _client()
    data = _register_and_login(client)
    client.cookies.clear()

    response = client.post("/api/v1/users/refresh-token", json={"refreshToken": data["refreshToken"]})

    assert response.status_code == 200


def test_refresh_cookie_takes_precedence_over_body():
    client = _client()
    _register_and_login(client)

    response = client.post("/api/v1/users/refresh-token", json={"refreshToken": "garbage"})

    assert response.status_code == 200


def test_refresh_without_token_is_unauthorized():
    response = _client().post("/api/v1/users/refresh-token")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request"


def test_logout_then_refresh_with_old_token_is_rejected():
    client = _client()
    data = _register_and_login(client)

    logout = client.post("/api/v1/users/logout")
    assert logout.status_code == 200
    assert client.cookies.get("accessToken") is None
    assert client.cookies.get("refreshToken") is None

    response = client.post("/api/v1/users/refresh-token", json={"refreshToken": data["refreshToken"]})

    assert response.status_code == 401
    assert response.json()["message"] == "Refresh token is expired or used"


def test_change_password_then_login_with_new_password():
    client = _client()
    _register_and_login(client)

    response = client.post(
        "/api/v1/users/change-password",
        json={"oldPassword": "pw12345678", "newPassword": "new-pw-987654", "confirmNewPassword": "new-pw-987654"},
    )
    assert response.status_code == 200
    assert client.cookies.get("accessToken") is None
    assert client.cookies.get("refreshToken") is None

    old = client.post("/api/v1/users/login", json={"username": "alice", "password": "pw12345678"})
    new = client.post("/api/v1/users/login", json={"username": "alice", "password": "new-pw-987654"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_update_account_details():
    client = _client()
    _register_and_login(client)

    response = client.patch(
        "/api/v1/users/update-account",
        json={"fullName": "Alice Smith", "email": "alice.smith@x.com"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["fullName"] == "Alice Smith"
    assert response.json()["data"]["email"] == "alice.smith@x.com"


def test_avatar_and_cover_image_uploads():
    media = FakeMediaStorage()
    client = _client(media_storage=media)
    _register_and_login(client)

    avatar = client.patch("/api/v1/users/avatar", files={"avatar": ("me.png", b"png-bytes", "image/png")})
    cover = client.patch("/api/v1/users/cover-image", files={"coverImage": ("c.jpg", b"jpg-bytes", "image/jpeg")})

    assert avatar.status_code == 200
    assert avatar.json()["data"]["avatar"] == "https://media.example.com/media-1/me.png"
    assert cover.status_code == 200
    assert cover.json()["data"]["coverImage"] == "https://media.example.com/media-2/c.jpg"


def test_avatar_without_file_is_bad_request():
    client = _client(media_storage=FakeMediaStorage())
    _register_and_login(client)

    response = client.patch("/api/v1/users/avatar")

    assert response.status_code == 400
    assert response.json()["message"] == "Avatar file is missing"


def test_unexpected_failure_returns_opaque_error():
    client = _client(store=ExplodingStore(), raise_server_exceptions=False)

    response = client.post("/api/v1/users/login", json={"username": "alice", "password": "pw12345678"})

    assert response.status_code == 500
    assert response.json() == {
        "statusCode": 500,
        "data": None,
        "message": "Internal server error",
        "success": False,
        "errors": [],
    }


def test_shutdown_closes_container_resources():
    closed: list[str] = []
    container = AppContainer(
        settings=make_settings(),
        store=FakeCredentialStore(),
        password_hasher=FakePasswordHasher(),
        token_service=make_token_service(),
        clock=FixedClock(),
        closers=(lambda: closed.append("engine"), lambda: closed.append("media")),
    )

    with TestClient(create_app(container=container), base_url="https://testserver") as client:
        assert client.get("/api/v1/healthcheck").status_code == 200
        assert closed == []

    assert closed == ["engine", "media"]
