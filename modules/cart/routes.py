"""
Cart Routes
=============
JSON API over the cart service. Every endpoint requires login.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from config.database import get_db
from common.responses import api_response
from modules.auth.deps import require_login
from modules.cart.service import cart_service
from modules.user.models import User

router = APIRouter(prefix="/cart", tags=["cart"])


# ==========================================
# Schemas
# ==========================================

class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AddToCartRequest(_Schema):
    product_id: int = Field(..., alias="productId")
    quantity: int = Field(1, ge=1)
    variant_id: Optional[int] = Field(None, alias="variantId")


class UpdateCartItemRequest(_Schema):
    item_id: int = Field(..., alias="itemId")
    quantity: int = Field(..., ge=1)


class AdjustQuantityRequest(_Schema):
    action: str


# ==========================================
# 🛒 View
# ==========================================

@router.get("")
def view_cart(db: Session = Depends(get_db), me: User = Depends(require_login)):
    data = cart_service.get_cart(db, me.id)
    message = "Cart retrieved successfully" if "id" in data else "Cart is empty"
    return api_response(data, message)


@router.get("/check/{product_id}")
def check_product(product_id: int, db: Session = Depends(get_db), me: User = Depends(require_login)):
    return api_response(cart_service.check_product_in_cart(db, me.id, product_id), "Cart status retrieved")


# ==========================================
# ➕➖ Mutations
# ==========================================

@router.post("/add")
def add_to_cart(payload: AddToCartRequest, db: Session = Depends(get_db), me: User = Depends(require_login)):
    cart = cart_service.add_to_cart(
        db, me.id, payload.product_id,
        quantity=payload.quantity,
        variant_id=payload.variant_id,
    )
    db.commit()
    return api_response(cart_service.serialize(cart), "Product added to cart successfully")


@router.put("/update")
def update_cart_item(payload: UpdateCartItemRequest, db: Session = Depends(get_db), me: User = Depends(require_login)):
    cart = cart_service.update_cart_item(db, me.id, payload.item_id, payload.quantity)
    db.commit()
    return api_response(cart_service.serialize(cart), "Cart updated successfully")


@router.delete("/item/{item_id}")
def remove_item(item_id: int, db: Session = Depends(get_db), me: User = Depends(require_login)):
    cart = cart_service.remove_from_cart(db, me.id, item_id)
    db.commit()
    return api_response(cart_service.serialize(cart), "Item removed from cart successfully")


@router.delete("/product/{product_id}")
def remove_product(product_id: int, db: Session = Depends(get_db), me: User = Depends(require_login)):
    cart = cart_service.remove_product_from_cart(db, me.id, product_id)
    db.commit()
    return api_response(cart_service.serialize(cart), "Product removed from cart successfully")


@router.delete("/clear")
def clear_cart(db: Session = Depends(get_db), me: User = Depends(require_login)):
    cart = cart_service.clear_cart(db, me.id)
    db.commit()
    return api_response(cart_service.serialize(cart), "Cart cleared successfully")


@router.patch("/item/{item_id}/adjust")
def adjust_item(
    item_id: int,
    payload: AdjustQuantityRequest,
    db: Session = Depends(get_db),
    me: User = Depends(require_login),
):
    cart = cart_service.adjust_cart_item_quantity(db, me.id, item_id, payload.action)
    db.commit()
    return api_response(cart_service.serialize(cart), f"Item quantity {payload.action}d successfully")
