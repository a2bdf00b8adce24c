from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


UserImageKind = Literal["avatar", "cover_image"]


@dataclass(frozen=True)
class UpdateAccountInput:
    user_id: str
    full_name: str | None
    email: str | None


@dataclass(frozen=True)
class UpdateUserImageInput:
    user_id: str
    filename: str
    content: bytes
    content_type: str | None


@dataclass(frozen=True)
class MediaUploadResult:
    url: str
    public_id: str
