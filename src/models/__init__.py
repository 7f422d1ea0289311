"""SQLAlchemy models."""

from src.models.cart_item import CartItem
from src.models.item import Item
from src.models.order import Order, OrderItem
from src.models.user import User

__all__ = [
    "User",
    "Item",
    "CartItem",
    "Order",
    "OrderItem",
]
