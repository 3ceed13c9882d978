"""
Catalog Module - Models
========================
Product with its variants (color/size/stock lines) and images.
Reviews live in modules.review.models.
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, Float, Text,
    ForeignKey, DateTime, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


# ==========================================
# 📦 Product
# ==========================================

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    rating = Column(Float, default=0, nullable=False)
    popularity = Column(Integer, default=0, nullable=False)
    release_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    variants = relationship(
        "ProductVariant", back_populates="product",
        cascade="all, delete-orphan", order_by="ProductVariant.id",
    )
    images = relationship(
        "ProductImage", back_populates="product",
        cascade="all, delete-orphan", order_by="ProductImage.sort_order",
    )
    reviews = relationship(
        "ProductReview", back_populates="product",
        cascade="all, delete-orphan", order_by="ProductReview.id",
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_product_rating"),
    )

    @property
    def image_urls(self):
        return [img.url for img in self.images]

    def find_variant(self, variant_id: int):
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def __repr__(self):
        return f"<Product {self.name} ({self.price})>"


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    color = Column(String, nullable=False)
    size = Column(String, nullable=False)
    stock = Column(Integer, default=0, nullable=False)

    product = relationship("Product", back_populates="variants")

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_variant_stock"),
    )


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    product = relationship("Product", back_populates="images")
