# pastebox/models/paste.py
# Canonical paste record and its storage format

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Paste(BaseModel):
    """A stored paste. Immutable once created.

    Serialized field names are fixed; they are both the Redis value
    format and the API representation.
    """
    model_config = ConfigDict(frozen=True)

    paste_id: str
    user_id: str
    content: str
    visibility: Visibility
    shared_with: List[str] = Field(default_factory=list)
    created_at: datetime
    expires_at: datetime

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def created_at_ms(self) -> int:
        """Index score: creation time in epoch milliseconds."""
        return int(self.created_at.timestamp() * 1000)

    def is_shared_with(self, user_id: str) -> bool:
        return user_id != self.user_id and user_id in self.shared_with

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str) -> "Paste":
        return cls.model_validate_json(raw)
