from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    username: str
    email: str
    full_name: str
    password_hash: str
    refresh_token: str | None
    avatar_url: str | None
    avatar_public_id: str | None
    cover_image_url: str | None
    cover_image_public_id: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserPatch:
    """Partial update of a user record.

    Fields left as ``None`` are not written. ``password_hash`` is only ever
    filled from a freshly hashed plaintext, so updates that do not carry a new
    password leave the stored hash untouched.
    """

    full_name: str | None = None
    email: str | None = None
    password_hash: str | None = None
    avatar_url: str | None = None
    avatar_public_id: str | None = None
    cover_image_url: str | None = None
    cover_image_public_id: str | None = None
    revoke_refresh_token: bool = False

    def to_values(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field in fields(self):
            if field.name == "revoke_refresh_token":
                continue
            value = getattr(self, field.name)
            if value is not None:
                values[field.name] = value
        if self.revoke_refresh_token:
            values["refresh_token"] = None
        return values
