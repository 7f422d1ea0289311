"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import PasswordReset, ResetRequest, UserResponse, UserSignin, UserSignup
from src.schemas.cart import CartItemRemoved, CartItemResponse
from src.schemas.item import ItemCount, ItemCreate, ItemResponse, ItemUpdate
from src.schemas.order import OrderItemResponse, OrderResponse
from src.schemas.user import PermissionsUpdate

__all__ = [
    "UserSignup",
    "UserSignin",
    "ResetRequest",
    "PasswordReset",
    "UserResponse",
    "PermissionsUpdate",
    "ItemCreate",
    "ItemUpdate",
    "ItemResponse",
    "ItemCount",
    "CartItemResponse",
    "CartItemRemoved",
    "OrderItemResponse",
    "OrderResponse",
]
