"""
Post procedure schemas (inputs/outputs).

Wire names are camelCase; storage columns stay snake_case (see `models.py`).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .models import TITLE_MAX_LENGTH

CONTENT_MAX_LENGTH = 256
MAX_POST_ID = 2**63 - 1


class CreatePostSchema(BaseModel):
    """
    Fields a client may supply when creating a post. Server-assigned fields are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)

    @field_validator("title", "content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        # Stored exactly as sent; only whitespace-only values are refused.
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class PostIdInput(BaseModel):
    id: str = Field(..., pattern=r"^\d{1,19}$")

    @field_validator("id")
    @classmethod
    def _fits_bigint(cls, value: str) -> str:
        if int(value) > MAX_POST_ID:
            raise ValueError("id is out of range")
        return value

    @property
    def post_id(self) -> int:
        return int(self.id)


class PostResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    title: str
    content: str
    created_at: datetime

    @field_serializer("id")
    def _id_as_string(self, value: int) -> str:
        return str(value)


class DeleteResult(BaseModel):
    deleted: int
