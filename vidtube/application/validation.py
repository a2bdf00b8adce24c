"""Input checks run before any use case touches the store.

Each ``validate_*`` function takes the raw input dataclass built at the HTTP
edge and returns a normalized copy, or raises ``ValidationError`` listing
every problem found.
"""

from __future__ import annotations

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from vidtube.application.dto.account import UpdateAccountInput
from vidtube.application.dto.auth import ChangePasswordInput, LoginInput, RegisterUserInput
from vidtube.domain.exceptions import ValidationError


MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class ValidRegistration:
    username: str
    email: str
    full_name: str
    password: str


@dataclass(frozen=True)
class ValidLogin:
    username: str | None
    email: str | None
    password: str


@dataclass(frozen=True)
class ValidPasswordChange:
    user_id: str
    old_password: str
    new_password: str


@dataclass(frozen=True)
class ValidAccountDetails:
    user_id: str
    full_name: str
    email: str


def normalize_identifier(value: str | None) -> str:
    return (value or "").strip().lower()


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_registration(command: RegisterUserInput) -> ValidRegistration:
    username = normalize_identifier(command.username)
    email = normalize_identifier(command.email)
    full_name = (command.full_name or "").strip()
    password = command.password or ""

    errors: list[str] = []
    if not username:
        errors.append("username is required")
    if not email:
        errors.append("email is required")
    elif not is_valid_email(email):
        errors.append("Please provide a valid email")
    if not full_name:
        errors.append("fullName is required")
    if not password.strip():
        errors.append("password is required")
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"password must have at least {MIN_PASSWORD_LENGTH} characters")

    if errors:
        raise ValidationError("All fields are required", errors=errors)
    return ValidRegistration(username=username, email=email, full_name=full_name, password=password)


def validate_login(command: LoginInput) -> ValidLogin:
    username = normalize_identifier(command.username) or None
    email = normalize_identifier(command.email) or None
    if username is None and email is None:
        raise ValidationError("Username or email is required")
    if not command.password:
        raise ValidationError("Password is required")
    return ValidLogin(username=username, email=email, password=command.password)


def validate_password_change(command: ChangePasswordInput) -> ValidPasswordChange:
    old_password = command.old_password or ""
    new_password = command.new_password or ""
    confirm = command.confirm_new_password or ""

    errors: list[str] = []
    if not old_password:
        errors.append("oldPassword is required")
    if not new_password:
        errors.append("newPassword is required")
    elif len(new_password) < MIN_PASSWORD_LENGTH:
        errors.append(f"newPassword must have at least {MIN_PASSWORD_LENGTH} characters")
    if errors:
        raise ValidationError("Invalid inputs passed", errors=errors)

    if new_password != confirm:
        raise ValidationError("New password and confirm password didn't match")
    return ValidPasswordChange(
        user_id=command.user_id,
        old_password=old_password,
        new_password=new_password,
    )


def validate_account_details(command: UpdateAccountInput) -> ValidAccountDetails:
    full_name = (command.full_name or "").strip()
    email = normalize_identifier(command.email)
    if not full_name or not email:
        raise ValidationError("All fields are required")
    if not is_valid_email(email):
        raise ValidationError("Please provide a valid email")
    return ValidAccountDetails(user_id=command.user_id, full_name=full_name, email=email)
