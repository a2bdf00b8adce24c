from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Body, Cookie, Depends, File, Response, UploadFile

from vidtube.api.container import AppContainer
from vidtube.api.deps import (
    ACCESS_COOKIE_NAME,
    REFRESH_COOKIE_NAME,
    get_change_password_use_case,
    get_container,
    get_current_user,
    get_login_user_use_case,
    get_logout_user_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
    get_update_account_details_use_case,
    get_update_avatar_use_case,
    get_update_cover_image_use_case,
)
from vidtube.api.responses import ApiErrorResponse, ApiResponse, api_response
from vidtube.api.schemas.users import (
    ChangePasswordRequest,
    EmptyResponse,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UpdateAccountRequest,
    UserResponse,
)
from vidtube.application.dto.account import UpdateAccountInput, UpdateUserImageInput
from vidtube.application.dto.auth import (
    AuthTokensOutput,
    AuthUserOutput,
    ChangePasswordInput,
    LoginInput,
    RefreshSessionInput,
    RegisterUserInput,
)
from vidtube.application.use_cases.change_password import ChangePasswordUseCase
from vidtube.application.use_cases.login_user import LoginUserUseCase
from vidtube.application.use_cases.logout_user import LogoutUserUseCase
from vidtube.application.use_cases.refresh_session import RefreshSessionUseCase
from vidtube.application.use_cases.register_user import RegisterUserUseCase
from vidtube.application.use_cases.update_account_details import UpdateAccountDetailsUseCase
from vidtube.application.use_cases.update_user_image import UpdateUserImageUseCase


router = APIRouter(prefix="/api/v1/users", tags=["users"])

_ERROR_RESPONSES = {
    400: {"model": ApiErrorResponse},
    401: {"model": ApiErrorResponse},
    500: {"model": ApiErrorResponse},
}


def _max_age_seconds(expires_at: datetime, now: datetime) -> int:
    return max(int((expires_at - now).total_seconds()), 0)


def _set_auth_cookies(response: Response, output: AuthTokensOutput, container: AppContainer) -> None:
    now = container.clock.now()
    secure = container.settings.cookie_secure
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=output.access_token,
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=_max_age_seconds(output.access_expires_at, now),
        path="/",
    )
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=output.refresh_token,
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=_max_age_seconds(output.refresh_expires_at, now),
        path="/",
    )


def _clear_auth_cookies(response: Response, container: AppContainer) -> None:
    secure = container.settings.cookie_secure
    for key in (ACCESS_COOKIE_NAME, REFRESH_COOKIE_NAME):
        response.delete_cookie(key=key, path="/", httponly=True, secure=secure, samesite="lax")


def _read_upload(user: AuthUserOutput, upload: UploadFile | None) -> UpdateUserImageInput:
    if upload is None:
        return UpdateUserImageInput(user_id=user.id, filename="", content=b"", content_type=None)
    return UpdateUserImageInput(
        user_id=user.id,
        filename=upload.filename or "upload",
        content=upload.file.read(),
        content_type=upload.content_type,
    )


@router.post(
    "/register",
    status_code=201,
    response_model=ApiResponse[UserResponse],
    responses={**_ERROR_RESPONSES, 409: {"model": ApiErrorResponse}},
)
def register_user(
    req: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    output = use_case.execute(
        RegisterUserInput(
            username=req.username,
            email=req.email,
            full_name=req.full_name,
            password=req.password,
        )
    )
    return api_response(201, UserResponse.from_output(output.user), "User registered successfully")


@router.post("/login", response_model=ApiResponse[LoginResponse], responses=_ERROR_RESPONSES)
def login_user(
    req: LoginRequest,
    response: Response,
    container: AppContainer = Depends(get_container),
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
):
    output = use_case.execute(
        LoginInput(
            username=req.username,
            email=req.email,
            password=req.password,
        )
    )
    _set_auth_cookies(response, output, container)
    return api_response(
        200,
        LoginResponse(
            user=UserResponse.from_output(output.user),
            access_token=output.access_token,
            refresh_token=output.refresh_token,
        ),
        "User logged in successfully",
    )


@router.post("/logout", response_model=ApiResponse[EmptyResponse], responses=_ERROR_RESPONSES)
def logout_user(
    response: Response,
    current_user: AuthUserOutput = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
    use_case: LogoutUserUseCase = Depends(get_logout_user_use_case),
):
    use_case.execute(user_id=current_user.id)
    _clear_auth_cookies(response, container)
    return api_response(200, EmptyResponse(), "User logged out successfully")


@router.post("/refresh-token", response_model=ApiResponse[TokenPairResponse], responses=_ERROR_RESPONSES)
def refresh_access_token(
    response: Response,
    req: RefreshTokenRequest | None = Body(default=None),
    refresh_token_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    container: AppContainer = Depends(get_container),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    token = refresh_token_cookie or (req.refresh_token if req is not None else None)
    output = use_case.execute(RefreshSessionInput(refresh_token=token))
    _set_auth_cookies(response, output, container)
    return api_response(
        200,
        TokenPairResponse(access_token=output.access_token, refresh_token=output.refresh_token),
        "Access token refreshed successfully",
    )


@router.post("/change-password", response_model=ApiResponse[EmptyResponse], responses=_ERROR_RESPONSES)
def change_current_password(
    req: ChangePasswordRequest,
    response: Response,
    current_user: AuthUserOutput = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    use_case.execute(
        ChangePasswordInput(
            user_id=current_user.id,
            old_password=req.old_password,
            new_password=req.new_password,
            confirm_new_password=req.confirm_new_password,
        )
    )
    # The stored refresh token is revoked with the old password.
    _clear_auth_cookies(response, container)
    return api_response(200, EmptyResponse(), "Password changed successfully")


@router.get("/current-user", response_model=ApiResponse[UserResponse], responses=_ERROR_RESPONSES)
def get_current_user_profile(
    current_user: AuthUserOutput = Depends(get_current_user),
):
    return api_response(200, UserResponse.from_output(current_user), "Current user fetched successfully")


@router.patch(
    "/update-account",
    response_model=ApiResponse[UserResponse],
    responses={**_ERROR_RESPONSES, 409: {"model": ApiErrorResponse}},
)
def update_account_details(
    req: UpdateAccountRequest,
    current_user: AuthUserOutput = Depends(get_current_user),
    use_case: UpdateAccountDetailsUseCase = Depends(get_update_account_details_use_case),
):
    output = use_case.execute(
        UpdateAccountInput(
            user_id=current_user.id,
            full_name=req.full_name,
            email=req.email,
        )
    )
    return api_response(200, UserResponse.from_output(output), "Account details updated successfully")


@router.patch("/avatar", response_model=ApiResponse[UserResponse], responses=_ERROR_RESPONSES)
def update_user_avatar(
    avatar: UploadFile | None = File(default=None),
    current_user: AuthUserOutput = Depends(get_current_user),
    use_case: UpdateUserImageUseCase = Depends(get_update_avatar_use_case),
):
    output = use_case.execute(_read_upload(current_user, avatar))
    return api_response(200, UserResponse.from_output(output), "Avatar updated successfully")


@router.patch("/cover-image", response_model=ApiResponse[UserResponse], responses=_ERROR_RESPONSES)
def update_user_cover_image(
    cover_image: UploadFile | None = File(default=None, alias="coverImage"),
    current_user: AuthUserOutput = Depends(get_current_user),
    use_case: UpdateUserImageUseCase = Depends(get_update_cover_image_use_case),
):
    output = use_case.execute(_read_upload(current_user, cover_image))
    return api_response(200, UserResponse.from_output(output), "Cover image updated successfully")
