from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from vidtube.domain.entities.user import User


def _as_str(value: Any) -> str:
    return str(value)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        username=row["username"],
        email=row["email"],
        full_name=row["full_name"],
        password_hash=row["password_hash"],
        refresh_token=row.get("refresh_token") or None,
        avatar_url=row.get("avatar_url"),
        avatar_public_id=row.get("avatar_public_id"),
        cover_image_url=row.get("cover_image_url"),
        cover_image_public_id=row.get("cover_image_public_id"),
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
    )
