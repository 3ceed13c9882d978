"""
Cart Module - Service Layer
==============================
One cart per user: add/update/remove/adjust/clear items, recompute totals.

Every mutation is read-modify-write on the user's cart followed by a
total recomputation from *current* product prices (live repricing, no
price snapshot at add time) and a flush. The flush bumps Cart.version;
a concurrent writer holding a stale version gets ConflictError.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from common.exceptions import (
    ConflictError, InsufficientStockError, InvalidArgumentError, NotFoundError,
)
from common.helpers import now_utc, to_decimal, to_money
from modules.cart.models import Cart, CartItem
from modules.catalog.models import Product
from modules.catalog.service import product_summary

logger = logging.getLogger("parushop.cart")

ADJUST_ACTIONS = ("increase", "decrease")


class CartService:

    def get_user_cart(self, db: Session, user_id: int) -> Optional[Cart]:
        return db.query(Cart).filter(Cart.user_id == user_id).first()

    def get_or_create_cart(self, db: Session, user_id: int) -> Cart:
        """Get existing cart or create new one for user."""
        cart = self.get_user_cart(db, user_id)
        if not cart:
            cart = Cart(user_id=user_id, total_amount=Decimal("0"))
            db.add(cart)
            try:
                db.flush()
            except IntegrityError:
                db.rollback()
                # Another request created this user's cart first
                raise ConflictError("Cart was modified by another request, please retry")
        return cart

    # ------------------------------------------
    # Mutations
    # ------------------------------------------

    def add_to_cart(
        self, db: Session, user_id: int, product_id: int,
        quantity: int = 1, variant_id: Optional[int] = None,
    ) -> Cart:
        """
        Add a product (optionally a specific variant). Adding a product that is
        already in the cart increases that line's quantity.

        Raises:
            InvalidArgumentError if quantity < 1
            NotFoundError if product or variant is missing
            InsufficientStockError if variant stock < quantity
        """
        if not product_id:
            raise InvalidArgumentError("Product ID is required")
        self._check_quantity(quantity)

        product = db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")

        variant = None
        if variant_id is not None:
            variant = product.find_variant(variant_id)
            if not variant:
                raise NotFoundError("Product variant not found")
            if variant.stock < quantity:
                raise InsufficientStockError("Not enough stock available")

        cart = self.get_or_create_cart(db, user_id)

        item = self._find_line(cart, product_id=product.id)
        if item:
            item.quantity += quantity
        else:
            cart.items.append(CartItem(product=product, quantity=quantity, variant=variant))

        return self._save(db, cart)

    def update_cart_item(self, db: Session, user_id: int, item_id: int, quantity: int) -> Cart:
        """Set a line's quantity."""
        if not item_id:
            raise InvalidArgumentError("Item ID and quantity are required")
        self._check_quantity(quantity)

        cart = self._require_cart(db, user_id)
        item = self._require_line(cart, item_id)
        item.quantity = quantity
        return self._save(db, cart)

    def remove_from_cart(self, db: Session, user_id: int, item_id: int) -> Cart:
        """Remove a line by id. Removing a line that isn't there is a no-op."""
        cart = self._require_cart(db, user_id)
        item = self._find_line(cart, item_id=item_id)
        if item:
            cart.items.remove(item)
        return self._save(db, cart)

    def remove_product_from_cart(self, db: Session, user_id: int, product_id: int) -> Cart:
        """Remove every line referencing a product."""
        cart = self._require_cart(db, user_id)
        for item in [it for it in cart.items if it.product_id == product_id]:
            cart.items.remove(item)
        return self._save(db, cart)

    def adjust_cart_item_quantity(self, db: Session, user_id: int, item_id: int, action: str) -> Cart:
        """
        Step a line's quantity by one. Decreasing a line at quantity 1 removes it.
        """
        if action not in ADJUST_ACTIONS:
            raise InvalidArgumentError("Action must be either increase or decrease")

        cart = self._require_cart(db, user_id)
        item = self._require_line(cart, item_id)

        if action == "increase":
            item.quantity += 1
        elif item.quantity <= 1:
            cart.items.remove(item)
        else:
            item.quantity -= 1

        return self._save(db, cart)

    def clear_cart(self, db: Session, user_id: int) -> Cart:
        """Empty the cart and zero the total. The cart row itself is kept."""
        cart = self._require_cart(db, user_id)
        cart.items.clear()
        return self._save(db, cart)

    # ------------------------------------------
    # Queries
    # ------------------------------------------

    def get_cart(self, db: Session, user_id: int) -> dict:
        """Cart with expanded product details, or an empty cart if the user has none."""
        cart = self.get_user_cart(db, user_id)
        if not cart:
            return {"items": [], "totalAmount": 0}
        return self.serialize(cart, detailed=True)

    def check_product_in_cart(self, db: Session, user_id: int, product_id: int) -> dict:
        item = db.query(CartItem).join(Cart).filter(
            Cart.user_id == user_id,
            CartItem.product_id == product_id,
        ).first()
        return {"isInCart": item is not None, "quantity": item.quantity if item else 0}

    # ------------------------------------------
    # Catalog hooks
    # ------------------------------------------

    def purge_product(self, db: Session, product_id: int) -> int:
        """Drop a (soon to be deleted) product from all carts. Returns number of carts touched."""
        carts = db.query(Cart).join(CartItem).filter(CartItem.product_id == product_id).all()
        for cart in carts:
            for item in [it for it in cart.items if it.product_id == product_id]:
                cart.items.remove(item)
            self._save(db, cart)
        if carts:
            logger.info("Removed product %s from %d carts", product_id, len(carts))
        return len(carts)

    def detach_variants(self, db: Session, variant_ids: List[int]):
        """Cart lines keep their product but lose a variant reference that is going away."""
        if not variant_ids:
            return
        items = db.query(CartItem).filter(CartItem.variant_id.in_(variant_ids)).all()
        for item in items:
            item.variant = None
        db.flush()

    # ------------------------------------------
    # Serialization
    # ------------------------------------------

    def serialize(self, cart: Cart, detailed: bool = False) -> dict:
        return {
            "id": cart.id,
            "user": cart.user_id,
            "items": [
                {
                    "id": item.id,
                    "product": product_summary(item.product, detailed=detailed),
                    "quantity": item.quantity,
                    "variant": item.variant_id,
                }
                for item in cart.items
            ],
            "totalAmount": to_money(cart.total_amount),
            "version": cart.version,
            "createdAt": cart.created_at,
            "updatedAt": cart.updated_at,
        }

    # ==========================================
    # Private helpers
    # ==========================================

    def _check_quantity(self, quantity):
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidArgumentError("Quantity must be at least 1")

    def _require_cart(self, db: Session, user_id: int) -> Cart:
        cart = self.get_user_cart(db, user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return cart

    def _require_line(self, cart: Cart, item_id: int) -> CartItem:
        item = self._find_line(cart, item_id=item_id)
        if not item:
            raise NotFoundError("Item not found in cart")
        return item

    def _find_line(self, cart: Cart, item_id: int = None, product_id: int = None) -> Optional[CartItem]:
        for item in cart.items:
            if item_id is not None and item.id == item_id:
                return item
            if product_id is not None and item.product_id == product_id:
                return item
        return None

    def _recalculate(self, cart: Cart) -> Decimal:
        total = sum(
            (to_decimal(item.product.price) * item.quantity for item in cart.items),
            Decimal("0"),
        )
        cart.total_amount = total
        return total

    def _save(self, db: Session, cart: Cart) -> Cart:
        self._recalculate(cart)
        # always touch the row so the version counter moves on every mutation
        cart.updated_at = now_utc()
        # attributes are unreadable once the flush fails
        cart_id, user_id = cart.id, cart.user_id
        try:
            db.flush()
        except StaleDataError:
            logger.warning("Concurrent modification of cart %s (user %s)", cart_id, user_id)
            raise ConflictError("Cart was modified by another request, please retry")
        return cart


# Singleton
cart_service = CartService()
