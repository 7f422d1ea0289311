"""Item schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ItemBase(BaseModel):
    """Base item schema."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    price: int = Field(..., ge=0)  # cents
    image: str | None = Field(None, max_length=1024)
    large_image: str | None = Field(None, max_length=1024)


class ItemCreate(ItemBase):
    """Schema for creating an item."""

    pass


class ItemUpdate(BaseModel):
    """Schema for updating an item."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price: int | None = Field(None, ge=0)
    image: str | None = Field(None, max_length=1024)
    large_image: str | None = Field(None, max_length=1024)


class ItemCount(BaseModel):
    """Total item count."""

    count: int


class ItemResponse(ItemBase):
    """Schema for item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
