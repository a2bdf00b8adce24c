from __future__ import annotations

from datetime import datetime
from typing import Protocol

from vidtube.domain.entities.user import User, UserPatch


class CredentialStorePort(Protocol):
    def find_by_id(self, *, user_id: str) -> User | None:
        ...

    def find_by_username_or_email(self, *, username: str | None, email: str | None) -> User | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        username: str,
        email: str,
        full_name: str,
        password_hash: str,
        created_at: datetime,
    ) -> User:
        ...

    def update_by_id(self, *, user_id: str, patch: UserPatch, updated_at: datetime) -> User | None:
        ...

    def set_refresh_token(self, *, user_id: str, refresh_token: str | None, updated_at: datetime) -> None:
        ...

    def compare_and_set_refresh_token(
        self,
        *,
        user_id: str,
        expected: str,
        refresh_token: str,
        updated_at: datetime,
    ) -> bool:
        ...
