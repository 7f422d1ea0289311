"""Cart service: add, remove and list cart lines."""

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from src.models.cart_item import CartItem
from src.models.item import Item
from src.services.errors import Forbidden, NotFound, Unauthenticated

logger = logging.getLogger(__name__)

# Insert races lost before giving up
MAX_INSERT_RETRIES = 3


class CartService:
    """Keeps at most one line per (user, item) and counts repeats in quantity."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_cart(self, user_id: int) -> list[CartItem]:
        """Get a user's cart lines, oldest first."""
        return (
            self.db.query(CartItem)
            .options(joinedload(CartItem.item))
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.id)
            .all()
        )

    def _get_line(self, user_id: int, item_id: int) -> CartItem | None:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.item_id == item_id)
            .populate_existing()
            .first()
        )

    def _increment(self, user_id: int, item_id: int) -> bool:
        """Atomically bump the quantity of an existing line. Returns whether one matched."""
        result = self.db.execute(
            update(CartItem)
            .where(CartItem.user_id == user_id, CartItem.item_id == item_id)
            .values(quantity=CartItem.quantity + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def add_to_cart(self, user_id: int | None, item_id: int) -> CartItem:
        """Add one of an item to the user's cart.

        The increment happens in a single UPDATE so concurrent adds never
        lose a count. When no line exists yet one is inserted; if another
        request inserted it first, the unique constraint rejects ours and
        the increment is retried.
        """
        if not user_id:
            raise Unauthenticated("You must be signed in")

        if not self.db.query(Item.id).filter(Item.id == item_id).first():
            raise NotFound("Item not found")

        for _ in range(MAX_INSERT_RETRIES):
            if self._increment(user_id, item_id):
                self.db.commit()
                line = self._get_line(user_id, item_id)
                if line is not None:
                    logger.info(f"Cart line {line.id} for user {user_id} now {line.quantity}")
                    return line
                # Removed since the increment; start a fresh line

            line = CartItem(user_id=user_id, item_id=item_id, quantity=1)
            self.db.add(line)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.debug(f"Lost insert race for user {user_id} item {item_id}, retrying")
                continue

            self.db.refresh(line)
            logger.info(f"Created cart line {line.id} for user {user_id} item {item_id}")
            return line

        raise RuntimeError(f"Could not add item {item_id} to cart of user {user_id}")

    def remove_from_cart(self, user_id: int | None, cart_item_id: int) -> int:
        """Delete one of the user's cart lines and return its id."""
        if not user_id:
            raise Unauthenticated("You must be signed in")

        line = self.db.query(CartItem).filter(CartItem.id == cart_item_id).first()
        if not line:
            raise NotFound("No cart item found")
        if line.user_id != user_id:
            raise Forbidden("That cart item is not yours")

        self.db.delete(line)
        self.db.commit()
        logger.info(f"Removed cart line {cart_item_id} for user {user_id}")
        return cart_item_id
