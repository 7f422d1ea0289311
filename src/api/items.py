"""Item API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.api.dependencies import SessionUser, get_current_user
from src.database import get_db
from src.models.cart_item import CartItem
from src.models.item import Item
from src.schemas.item import ItemCount, ItemCreate, ItemResponse, ItemUpdate
from src.services.authorization import ensure_can_delete, ensure_can_update
from src.services.errors import NotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/items", tags=["items"])


def get_item_or_404(db: Session, item_id: int) -> Item:
    """Get an item by ID or raise 404."""
    item = db.query(Item).filter(Item.id == item_id).first()
    if not item:
        raise NotFound("Item not found")
    return item


@router.get("", response_model=list[ItemResponse])
def get_items(
    db: Annotated[Session, Depends(get_db)],
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
):
    """Get items in the store, newest first."""
    return db.query(Item).order_by(Item.id.desc()).offset(skip).limit(limit).all()


@router.get("/count", response_model=ItemCount)
def count_items(db: Annotated[Session, Depends(get_db)]):
    """Total number of items, for paging through the store."""
    return ItemCount(count=db.query(func.count(Item.id)).scalar())


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a single item."""
    return get_item_or_404(db, item_id)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item_data: ItemCreate,
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create an item owned by the current user."""
    item = Item(**item_data.model_dump(), user_id=current_user.id)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(f"User {current_user.id} created item {item.id}")
    return item


@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    item_data: ItemUpdate,
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update an item (owner, ADMIN or ITEMUPDATE)."""
    item = get_item_or_404(db, item_id)
    ensure_can_update(current_user, item)

    for field, value in item_data.model_dump(exclude_unset=True).items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete an item (owner, ADMIN or ITEMDELETE)."""
    item = get_item_or_404(db, item_id)
    ensure_can_delete(current_user, item)

    db.query(CartItem).filter(CartItem.item_id == item_id).delete(synchronize_session=False)
    db.delete(item)
    db.commit()
    logger.info(f"User {current_user.id} deleted item {item_id}")
