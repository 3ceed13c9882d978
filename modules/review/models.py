"""
Review Module - Models
========================
Product reviews embedded in the catalog: a free-text user label,
a 1-5 star rating and an optional comment.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class ProductReview(Base):
    __tablename__ = "product_reviews"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user = Column(String(200), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="reviews")

    __table_args__ = (
        Index("ix_review_product", "product_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )
