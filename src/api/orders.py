"""Order API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from src.api.dependencies import SessionUser, get_current_user
from src.database import get_db
from src.models.order import Order
from src.schemas.order import OrderResponse
from src.services.authorization import ensure_can_view_order
from src.services.errors import NotFound

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get("", response_model=list[OrderResponse])
def get_orders(
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the current user's orders."""
    return (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == current_user.id)
        .order_by(Order.id.desc())
        .all()
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get one order. Requires owning it and holding ADMIN."""
    order = db.query(Order).options(selectinload(Order.items)).filter(Order.id == order_id).first()
    if not order:
        raise NotFound("Order not found")
    ensure_can_view_order(order, current_user)
    return order
