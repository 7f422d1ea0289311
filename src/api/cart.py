"""Cart API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import RequestContext, get_cart_service, get_request_context
from src.schemas.cart import CartItemRemoved, CartItemResponse
from src.services.cart_service import CartService
from src.services.errors import Unauthenticated

router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


@router.get("", response_model=list[CartItemResponse])
def get_cart(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    cart: Annotated[CartService, Depends(get_cart_service)],
):
    """Get the current user's cart."""
    if not ctx.is_authenticated:
        raise Unauthenticated()
    return cart.get_cart(ctx.user_id)


@router.post("/{item_id}", response_model=CartItemResponse, status_code=status.HTTP_200_OK)
def add_to_cart(
    item_id: int,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    cart: Annotated[CartService, Depends(get_cart_service)],
):
    """Add one of an item to the cart."""
    return cart.add_to_cart(ctx.user_id, item_id)


@router.delete("/{cart_item_id}", response_model=CartItemRemoved)
def remove_from_cart(
    cart_item_id: int,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    cart: Annotated[CartService, Depends(get_cart_service)],
):
    """Remove a line from the cart."""
    return CartItemRemoved(id=cart.remove_from_cart(ctx.user_id, cart_item_id))
