"""Pydantic schemas for ProfileStatus records."""

from pydantic import BaseModel, ConfigDict, Field


class StatusBase(BaseModel):
    """Base schema for ProfileStatus."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(None, max_length=500)


class StatusCreate(StatusBase):
    """Schema for creating a ProfileStatus."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class StatusUpdate(BaseModel):
    """Schema for updating a ProfileStatus."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=500)


class StatusRecord(StatusBase):
    """A status as read back from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
