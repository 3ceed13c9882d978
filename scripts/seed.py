"""
ParuShop - Demo Data Seeder
============================
Seeds a demo customer and a small catalog for local testing.

Usage:
    python scripts/seed.py          # Seed (skips products that already exist by name)
    python scripts/seed.py --reset  # Drop all tables and reseed
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import DATABASE_URL
from config.database import Base, build_engine, build_session_factory
from modules.user.models import User  # noqa
from modules.catalog.models import Product
from modules.review.models import ProductReview  # noqa
from modules.cart.models import Cart, CartItem  # noqa
from modules.catalog.schemas import ProductIn
from modules.catalog.service import catalog_service
from modules.user.service import user_service

DEMO_EMAIL = "demo@parushop.io"
DEMO_PASSWORD = "demo-password"

PRODUCTS = [
    {
        "name": "Classic Cotton T-Shirt",
        "category": "apparel",
        "price": 19.99,
        "rating": 4.4,
        "popularity": 320,
        "description": "Heavyweight cotton tee with a relaxed fit.",
        "images": ["/images/tshirt-front.jpg", "/images/tshirt-back.jpg"],
        "variants": [
            {"color": "Black", "size": "M", "stock": 40},
            {"color": "Black", "size": "L", "stock": 25},
            {"color": "White", "size": "M", "stock": 0},
        ],
        "reviews": [
            {"user": "Sam", "rating": 5, "comment": "Fits perfectly."},
            {"user": "Ana", "rating": 4, "comment": "Shrinks a bit after washing."},
        ],
    },
    {
        "name": "Trail Running Shoes",
        "category": "footwear",
        "price": 89.50,
        "rating": 4.7,
        "popularity": 210,
        "description": "Lightweight trail shoes with a grippy outsole.",
        "images": ["/images/trail-shoes.jpg"],
        "variants": [
            {"color": "Blue", "size": "42", "stock": 12},
            {"color": "Blue", "size": "44", "stock": 3},
        ],
        "reviews": [{"user": "Lee", "rating": 5, "comment": "Great on wet rocks."}],
    },
    {
        "name": "Canvas Tote Bag",
        "category": "accessories",
        "price": 12.00,
        "rating": 4.1,
        "popularity": 95,
        "description": "Sturdy canvas tote with inner pocket.",
        "images": ["/images/tote.jpg"],
        "variants": [{"color": "Natural", "size": "One Size", "stock": 100}],
    },
    {
        "name": "Wool Beanie",
        "category": "accessories",
        "price": 15.00,
        "rating": 3.9,
        "popularity": 60,
        "description": "Merino wool beanie, one size fits most.",
        "images": [],
        "variants": [],
    },
]


def seed(session_factory):
    db = session_factory()
    try:
        print("[1/2] Demo user...")
        if user_service.find_by_email(db, DEMO_EMAIL):
            print(f"  = {DEMO_EMAIL} exists")
        else:
            user_service.create(db, name="Demo Customer", email=DEMO_EMAIL, password=DEMO_PASSWORD)
            print(f"  + {DEMO_EMAIL} / {DEMO_PASSWORD}")

        print("[2/2] Products...")
        for data in PRODUCTS:
            if db.query(Product).filter(Product.name == data["name"]).first():
                print(f"  = {data['name']} exists")
                continue
            product = catalog_service.create_product(db, ProductIn(**data))
            print(f"  + #{product.id} {product.name} ({len(product.variants)} variants)")

        db.commit()
        print("\nSeed complete!")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    engine = build_engine(DATABASE_URL)
    if "--reset" in sys.argv:
        print("[0] Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    seed(build_session_factory(engine))
