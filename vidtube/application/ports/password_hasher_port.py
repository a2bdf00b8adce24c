from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """One-way password hashing with an embedded per-hash salt."""

    def hash(self, plain_password: str) -> str:
        ...

    def verify(self, plain_password: str, password_hash: str) -> bool:
        """False for a wrong password and for a hash this hasher cannot read."""
        ...
