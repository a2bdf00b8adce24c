from __future__ import annotations

import pytest

from vidtube.application.dto.auth import ChangePasswordInput, LoginInput, RegisterUserInput
from vidtube.application.validation import (
    is_valid_email,
    validate_login,
    validate_password_change,
    validate_registration,
)
from vidtube.domain.exceptions import ValidationError


def test_registration_is_trimmed_and_lowercased():
    valid = validate_registration(
        RegisterUserInput(username=" Bob ", email=" BOB@Mail.COM ", full_name="  Bob B ", password="hunter2hunter2")
    )

    assert valid.username == "bob"
    assert valid.email == "bob@mail.com"
    assert valid.full_name == "Bob B"
    assert valid.password == "hunter2hunter2"


def test_registration_collects_every_problem():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration(RegisterUserInput(username="   ", email="bad", full_name="", password="short"))

    assert excinfo.value.message == "All fields are required"
    assert excinfo.value.errors == [
        "username is required",
        "Please provide a valid email",
        "fullName is required",
        "password must have at least 8 characters",
    ]


def test_whitespace_password_counts_as_missing():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration(RegisterUserInput(username="bob", email="b@m.co", full_name="Bob", password="   "))

    assert excinfo.value.errors == ["password is required"]


def test_login_keeps_only_provided_identifiers():
    valid = validate_login(LoginInput(username=None, email=" Bob@Mail.com", password="x"))

    assert valid.username is None
    assert valid.email == "bob@mail.com"


def test_password_change_requires_long_enough_new_password():
    with pytest.raises(ValidationError) as excinfo:
        validate_password_change(
            ChangePasswordInput(user_id="u", old_password="", new_password="short", confirm_new_password="short")
        )

    assert excinfo.value.errors == ["oldPassword is required", "newPassword must have at least 8 characters"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("a@b.co", True),
        ("first.last@sub.domain.org", True),
        ("no-at-sign", False),
        ("a@b", False),
        ("a b@c.de", False),
        ("alice@x..com", False),
        ("alice@.x.com", False),
        ("alice@x.com.", False),
        ("alice@-x-.com", False),
        ("alice@@x.com", False),
    ],
)
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected


def test_registration_rejects_malformed_email_domain():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration(
            RegisterUserInput(username="bob", email="bob@x..com", full_name="Bob", password="hunter2hunter2")
        )

    assert excinfo.value.errors == ["Please provide a valid email"]
