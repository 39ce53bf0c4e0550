"""Pydantic schemas validating Profile records at the store boundary."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MOBILE_PATTERN = r"^\+?[0-9][0-9 ()\-]*[0-9]$"


def _coerce_comments(value: Any) -> Any:
    # Older records stored a single free-text comment.
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


class ProfileBase(BaseModel):
    """Fields shared by every profile shape."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    caste_or_community: str = Field(..., min_length=1, max_length=120)
    age: int = Field(..., ge=18)
    star: str = Field(..., min_length=1, max_length=50)
    star_match_score: float = Field(..., ge=0, le=10)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    mobile_number: str = Field(..., min_length=10, max_length=20, pattern=MOBILE_PATTERN)
    status_id: str = Field(..., min_length=1, max_length=64)
    matrimony_id: str = Field(..., min_length=1, max_length=64)
    comments: list[str] = Field(default_factory=list)

    @field_validator("comments", mode="before")
    @classmethod
    def normalize_comments(cls, v: Any) -> Any:
        return _coerce_comments(v)


class ProfileCreate(ProfileBase):
    """Schema for creating a Profile."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class ProfileUpdate(BaseModel):
    """Schema for a partial Profile update.

    ``id`` and timestamps are not accepted; unknown fields are rejected.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=120)
    caste_or_community: str | None = Field(None, min_length=1, max_length=120)
    age: int | None = Field(None, ge=18)
    star: str | None = Field(None, min_length=1, max_length=50)
    star_match_score: float | None = Field(None, ge=0, le=10)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=1, max_length=100)
    mobile_number: str | None = Field(
        None, min_length=10, max_length=20, pattern=MOBILE_PATTERN
    )
    status_id: str | None = Field(None, min_length=1, max_length=64)
    matrimony_id: str | None = Field(None, min_length=1, max_length=64)
    comments: list[str] | None = None

    @field_validator("comments", mode="before")
    @classmethod
    def normalize_comments(cls, v: Any) -> Any:
        return _coerce_comments(v)

    def changes(self) -> dict[str, Any]:
        """Fields the caller explicitly set to a non-null value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class ProfileRecord(ProfileBase):
    """A profile as read back from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    created_at: datetime
    updated_at: datetime
