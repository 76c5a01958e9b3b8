"""
Tag Schemas.

Pydantic schemas for tag creation and display.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from notekeeper.backend.models.tag import DEFAULT_TAG_COLOR


class TagCreate(BaseModel):
    """Schema for creating a new tag."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Tag name, unique ignoring case",
        examples=["work"],
    )
    color: str = Field(
        default=DEFAULT_TAG_COLOR,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Display color as #RRGGBB",
    )


class TagResponse(BaseModel):
    """Schema for a tag shown to callers."""

    id: str
    name: str
    color: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
