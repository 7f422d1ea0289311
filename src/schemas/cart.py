"""Cart schemas."""

from pydantic import BaseModel, ConfigDict

from src.schemas.item import ItemResponse


class CartItemResponse(BaseModel):
    """One cart line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    quantity: int
    item_id: int
    item: ItemResponse | None = None


class CartItemRemoved(BaseModel):
    id: int
