from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from pastebox.models.paste import Paste, Visibility

DEFAULT_MAX_CONTENT_BYTES = 100 * 1024


class PasteCreate(BaseModel):
    """Validated create payload.

    The content bound comes from validation context key
    ``max_content_bytes`` and defaults to 100 KiB.
    """
    content: str
    visibility: Visibility
    shared_with: List[str] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def validate_content_size(cls, v: str, info: ValidationInfo) -> str:
        limit = (info.context or {}).get("max_content_bytes", DEFAULT_MAX_CONTENT_BYTES)
        if len(v.encode("utf-8")) > limit:
            raise ValueError(f"Content must be at most {limit} bytes")
        return v

    @field_validator("shared_with")
    @classmethod
    def validate_shared_with(cls, v: List[str]) -> List[str]:
        if any(not user_id.strip() for user_id in v):
            raise ValueError("shared_with must contain non-empty user ids")
        return v

    @model_validator(mode="after")
    def check_sharing_matches_visibility(self) -> "PasteCreate":
        if self.visibility is Visibility.PUBLIC and self.shared_with:
            raise ValueError("shared_with is only allowed for private pastes")
        return self


class RateLimitInfo(BaseModel):
    remaining: int
    reset_at: datetime


class PasteCreateResponse(BaseModel):
    paste: Paste
    rate_limit: RateLimitInfo


class PasteResponse(BaseModel):
    paste: Paste


class PasteListResponse(BaseModel):
    pastes: List[Paste]


class DeleteResponse(BaseModel):
    success: bool


class RateLimitResponse(BaseModel):
    remaining: int
    limit: int
    reset_at: datetime
