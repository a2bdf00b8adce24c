from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from vidtube.application.ports.credential_store_port import CredentialStorePort
from vidtube.domain.entities.user import User, UserPatch
from vidtube.domain.exceptions import ConflictError
from vidtube.infrastructure.db.mappers.users_mapper import map_row_to_user
from vidtube.infrastructure.db.models.users import UserModel


logger = logging.getLogger(__name__)

users = UserModel.__table__


class SqlUsersRepository(CredentialStorePort):
    def __init__(self, engine: Engine):
        self._engine = engine

    def find_by_id(self, *, user_id: str) -> User | None:
        stmt = select(users).where(users.c.id == user_id).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def find_by_username_or_email(self, *, username: str | None, email: str | None) -> User | None:
        clauses = []
        if username:
            clauses.append(func.lower(users.c.username) == username.strip().lower())
        if email:
            clauses.append(func.lower(users.c.email) == email.strip().lower())
        if not clauses:
            return None

        stmt = select(users).where(or_(*clauses)).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

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
        stmt = insert(users).values(
            id=user_id,
            username=username,
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            refresh_token=None,
            created_at=created_at,
            updated_at=created_at,
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except IntegrityError as exc:
            logger.info("users_repository: create_user_conflict username=%s", username)
            raise ConflictError("User with email or username already exists") from exc

        user = self.find_by_id(user_id=user_id)
        if user is None:
            raise RuntimeError("User row missing right after insert.")
        return user

    def update_by_id(self, *, user_id: str, patch: UserPatch, updated_at: datetime) -> User | None:
        values = patch.to_values()
        values["updated_at"] = updated_at
        stmt = update(users).where(users.c.id == user_id).values(**values)
        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("User with email or username already exists") from exc

        if result.rowcount == 0:
            return None
        return self.find_by_id(user_id=user_id)

    def set_refresh_token(self, *, user_id: str, refresh_token: str | None, updated_at: datetime) -> None:
        stmt = (
            update(users)
            .where(users.c.id == user_id)
            .values(refresh_token=refresh_token, updated_at=updated_at)
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def compare_and_set_refresh_token(
        self,
        *,
        user_id: str,
        expected: str,
        refresh_token: str,
        updated_at: datetime,
    ) -> bool:
        stmt = (
            update(users)
            .where(users.c.id == user_id, users.c.refresh_token == expected)
            .values(refresh_token=refresh_token, updated_at=updated_at)
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount == 1
