"""Order schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class OrderItemResponse(BaseModel):
    """An item as it was when ordered."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    price: int
    image: str | None
    quantity: int


class OrderResponse(BaseModel):
    """Order response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    total: int
    charge: str
    created_at: datetime
    items: list[OrderItemResponse] = []
