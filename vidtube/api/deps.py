from __future__ import annotations

from fastapi import Cookie, Depends, Header, Request

from vidtube.api.container import AppContainer
from vidtube.application.dto.auth import AuthUserOutput
from vidtube.application.use_cases.authenticate_user import AuthenticateUserUseCase
from vidtube.application.use_cases.change_password import ChangePasswordUseCase
from vidtube.application.use_cases.login_user import LoginUserUseCase
from vidtube.application.use_cases.logout_user import LogoutUserUseCase
from vidtube.application.use_cases.refresh_session import RefreshSessionUseCase
from vidtube.application.use_cases.register_user import RegisterUserUseCase
from vidtube.application.use_cases.update_account_details import UpdateAccountDetailsUseCase
from vidtube.application.use_cases.update_user_image import UpdateUserImageUseCase
from vidtube.domain.exceptions import InternalError


ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"


def extract_bearer_token(authorization: str | None) -> str:
    parts = (authorization or "").strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ""
    return parts[1].strip()


def get_container(request: Request) -> AppContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise InternalError("Service is not initialized")
    return container


def get_register_user_use_case(container: AppContainer = Depends(get_container)) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        store=container.store,
        password_hasher=container.password_hasher,
        clock=container.clock,
    )


def get_login_user_use_case(container: AppContainer = Depends(get_container)) -> LoginUserUseCase:
    return LoginUserUseCase(
        store=container.store,
        password_hasher=container.password_hasher,
        token_port=container.token_service,
        clock=container.clock,
    )


def get_refresh_session_use_case(container: AppContainer = Depends(get_container)) -> RefreshSessionUseCase:
    return RefreshSessionUseCase(
        store=container.store,
        token_port=container.token_service,
        clock=container.clock,
        strict_rotation=container.settings.strict_refresh_rotation,
    )


def get_logout_user_use_case(container: AppContainer = Depends(get_container)) -> LogoutUserUseCase:
    return LogoutUserUseCase(store=container.store, clock=container.clock)


def get_change_password_use_case(container: AppContainer = Depends(get_container)) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(
        store=container.store,
        password_hasher=container.password_hasher,
        clock=container.clock,
    )


def get_authenticate_user_use_case(
    container: AppContainer = Depends(get_container),
) -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(
        store=container.store,
        token_port=container.token_service,
        clock=container.clock,
    )


def get_update_account_details_use_case(
    container: AppContainer = Depends(get_container),
) -> UpdateAccountDetailsUseCase:
    return UpdateAccountDetailsUseCase(store=container.store, clock=container.clock)


def get_update_avatar_use_case(container: AppContainer = Depends(get_container)) -> UpdateUserImageUseCase:
    return UpdateUserImageUseCase(
        store=container.store,
        media_storage=container.media_storage,
        clock=container.clock,
        kind="avatar",
    )


def get_update_cover_image_use_case(
    container: AppContainer = Depends(get_container),
) -> UpdateUserImageUseCase:
    return UpdateUserImageUseCase(
        store=container.store,
        media_storage=container.media_storage,
        clock=container.clock,
        kind="cover_image",
    )


def get_current_user(
    authorization: str | None = Header(default=None),
    access_token_cookie: str | None = Cookie(default=None, alias=ACCESS_COOKIE_NAME),
    use_case: AuthenticateUserUseCase = Depends(get_authenticate_user_use_case),
) -> AuthUserOutput:
    token = access_token_cookie or extract_bearer_token(authorization)
    return use_case.execute(token=token)
