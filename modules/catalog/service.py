"""
Catalog Module - Service Layer
================================
Product listing (filter/sort/paginate), CRUD, and bulk creation.
Variants, images and reviews are replaced wholesale when given.
"""

import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from common.exceptions import InvalidArgumentError, NotFoundError
from common.helpers import to_decimal, to_money
from modules.catalog.models import Product, ProductVariant, ProductImage
from modules.catalog.schemas import ProductIn, ProductUpdate, VariantIn, ReviewIn
from modules.review.models import ProductReview

logger = logging.getLogger("parushop.catalog")

SORTABLE_FIELDS = {
    "createdAt": Product.created_at,
    "created_at": Product.created_at,
    "price": Product.price,
    "rating": Product.rating,
    "popularity": Product.popularity,
    "releaseDate": Product.release_date,
    "release_date": Product.release_date,
    "name": Product.name,
}

# Columns that may not be set to null through a partial update
_NOT_NULL_FIELDS = {"name", "category", "price", "rating", "popularity", "release_date", "description"}


class CatalogService:

    # ------------------------------------------
    # Read
    # ------------------------------------------

    def list_products(
        self, db: Session,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_rating: Optional[float] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Tuple[List[Product], dict]:
        """
        Filtered, sorted, paginated product list.
        Returns: (products, pagination) with pagination = {total, page, limit, totalPages}
        """
        if page < 1 or limit < 1:
            raise InvalidArgumentError("page and limit must be positive")
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise InvalidArgumentError(f"Unsupported sort field: {sort_by}")

        q = db.query(Product)
        if category:
            q = q.filter(Product.category == category)
        if min_price is not None:
            q = q.filter(Product.price >= to_decimal(min_price))
        if max_price is not None:
            q = q.filter(Product.price <= to_decimal(max_price))
        if min_rating is not None:
            q = q.filter(Product.rating >= min_rating)

        total = q.count()
        if sort_order == "asc":
            q = q.order_by(column.asc(), Product.id.asc())
        else:
            q = q.order_by(column.desc(), Product.id.desc())
        products = q.offset((page - 1) * limit).limit(limit).all()

        return products, {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }

    def get_product(self, db: Session, product_id: int) -> Product:
        product = db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    # ------------------------------------------
    # Write
    # ------------------------------------------

    def create_product(self, db: Session, data: ProductIn) -> Product:
        product = self._build(data)
        db.add(product)
        db.flush()
        logger.info("Product created: id=%s name=%s", product.id, product.name)
        return product

    def create_products(self, db: Session, items: List[ProductIn]) -> List[Product]:
        if not items:
            raise InvalidArgumentError("Valid products array is required")
        products = [self._build(data) for data in items]
        db.add_all(products)
        db.flush()
        logger.info("Bulk created %d products", len(products))
        return products

    def update_product(self, db: Session, product_id: int, data: ProductUpdate) -> Product:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise InvalidArgumentError("Update data is required")

        product = self.get_product(db, product_id)

        for field, value in changes.items():
            if value is None and field in _NOT_NULL_FIELDS:
                raise InvalidArgumentError(f"{field} cannot be null")

        if "variants" in changes:
            from modules.cart.service import cart_service
            cart_service.detach_variants(db, [v.id for v in product.variants])
            product.variants = self._variants(data.variants or [])
        if "images" in changes:
            product.images = self._images(data.images or [])
        if "reviews" in changes:
            product.reviews = self._reviews(data.reviews or [])

        for field in ("name", "category", "rating", "popularity", "release_date", "description"):
            if field in changes:
                setattr(product, field, changes[field])
        if "price" in changes:
            # Carts are repriced on their next mutation, not here
            product.price = to_decimal(changes["price"])

        db.flush()
        return product

    def delete_product(self, db: Session, product_id: int):
        """Delete a product and drop it from every cart that holds it."""
        from modules.cart.service import cart_service

        product = self.get_product(db, product_id)
        cart_service.purge_product(db, product.id)
        db.delete(product)
        db.flush()
        logger.info("Product deleted: id=%s", product_id)

    # ==========================================
    # Private helpers
    # ==========================================

    def _build(self, data: ProductIn) -> Product:
        product = Product(
            name=data.name,
            category=data.category,
            price=to_decimal(data.price),
            rating=data.rating,
            popularity=data.popularity,
            description=data.description,
        )
        if data.release_date:
            product.release_date = data.release_date
        product.variants = self._variants(data.variants)
        product.images = self._images(data.images)
        product.reviews = self._reviews(data.reviews)
        return product

    def _variants(self, variants: List[VariantIn]) -> List[ProductVariant]:
        return [ProductVariant(color=v.color, size=v.size, stock=v.stock) for v in variants]

    def _images(self, urls: List[str]) -> List[ProductImage]:
        return [ProductImage(url=url, sort_order=i) for i, url in enumerate(urls) if url]

    def _reviews(self, reviews: List[ReviewIn]) -> List[ProductReview]:
        result = []
        for r in reviews:
            review = ProductReview(user=r.user, rating=r.rating, comment=r.comment)
            if r.created_at:
                review.created_at = r.created_at
            result.append(review)
        return result


# ==========================================
# Serialization
# ==========================================

def serialize_variant(variant: ProductVariant) -> dict:
    return {"id": variant.id, "color": variant.color, "size": variant.size, "stock": variant.stock}


def serialize_product(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "price": to_money(product.price),
        "rating": product.rating,
        "popularity": product.popularity,
        "releaseDate": product.release_date,
        "description": product.description,
        "variants": [serialize_variant(v) for v in product.variants],
        "images": product.image_urls,
        "reviews": [
            {
                "id": r.id,
                "user": r.user,
                "rating": r.rating,
                "comment": r.comment,
                "createdAt": r.created_at,
            }
            for r in product.reviews
        ],
        "createdAt": product.created_at,
        "updatedAt": product.updated_at,
    }


def product_summary(product: Product, detailed: bool = False) -> dict:
    """Product fields embedded in cart lines (detailed adds description/category/variants)."""
    summary = {
        "id": product.id,
        "name": product.name,
        "price": to_money(product.price),
        "images": product.image_urls,
    }
    if detailed:
        summary["description"] = product.description
        summary["category"] = product.category
        summary["variants"] = [serialize_variant(v) for v in product.variants]
    return summary


# Singleton
catalog_service = CatalogService()
