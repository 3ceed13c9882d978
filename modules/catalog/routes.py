"""
Catalog Routes
================
Public product API: list (filter/sort/paginate), detail, create, bulk create, update, delete.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from common.responses import api_response
from modules.catalog.schemas import ProductIn, ProductUpdate
from modules.catalog.service import catalog_service, serialize_product

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(
    category: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    products, pagination = catalog_service.list_products(
        db,
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return api_response(
        {"products": [serialize_product(p) for p in products], "pagination": pagination},
        "Products retrieved successfully",
    )


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = catalog_service.get_product(db, product_id)
    return api_response(serialize_product(product), "Product retrieved successfully")


@router.post("")
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    product = catalog_service.create_product(db, payload)
    db.commit()
    return api_response(serialize_product(product), "Product created successfully", status_code=201)


@router.post("/bulk")
def create_products(payload: List[ProductIn], db: Session = Depends(get_db)):
    products = catalog_service.create_products(db, payload)
    db.commit()
    return api_response([serialize_product(p) for p in products], "Products added successfully", status_code=201)


@router.put("/{product_id}")
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = catalog_service.update_product(db, product_id, payload)
    db.commit()
    return api_response(serialize_product(product), "Product updated successfully")


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    catalog_service.delete_product(db, product_id)
    db.commit()
    return api_response({}, "Product deleted successfully")
