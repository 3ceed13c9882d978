"""
Catalog Module - Request Schemas
=================================
Validated at the boundary; JSON keys are camelCase on the wire.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class VariantIn(_Schema):
    color: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0)


class ReviewIn(_Schema):
    user: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class ProductIn(_Schema):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    rating: float = Field(0, ge=0, le=5)
    popularity: int = 0
    release_date: Optional[datetime] = Field(None, alias="releaseDate")
    description: str = Field(..., min_length=1)
    variants: List[VariantIn] = []
    images: List[str] = []
    reviews: List[ReviewIn] = []


class ProductUpdate(_Schema):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)
    popularity: Optional[int] = None
    release_date: Optional[datetime] = Field(None, alias="releaseDate")
    description: Optional[str] = Field(None, min_length=1)
    variants: Optional[List[VariantIn]] = None
    images: Optional[List[str]] = None
    reviews: Optional[List[ReviewIn]] = None
