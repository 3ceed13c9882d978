"""
ParuShop - Database Initialization
===================================
Creates all tables if they don't exist.
Safe to run multiple times (CREATE IF NOT EXISTS).
Production schemas should be managed with `alembic upgrade head` instead.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --drop   # Drop and recreate all tables
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from config.settings import DATABASE_URL
from config.database import Base, build_engine

# Import ALL models so Base.metadata knows about them
from modules.user.models import User  # noqa
from modules.catalog.models import Product, ProductVariant, ProductImage  # noqa
from modules.review.models import ProductReview  # noqa
from modules.cart.models import Cart, CartItem  # noqa


def init_db(engine, drop_first=False):
    if drop_first:
        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
        print("Done.")

    print("Creating all tables...")
    Base.metadata.create_all(bind=engine)

    tables = inspect(engine).get_table_names()
    print(f"\nTables in database ({len(tables)}):")
    for t in sorted(tables):
        print(f"  - {t}")
    print("\nDatabase initialized successfully!")


if __name__ == "__main__":
    drop = "--drop" in sys.argv
    if drop:
        confirm = input("This will DROP all tables. Type 'yes': ")
        if confirm.strip().lower() != "yes":
            print("Aborted.")
            sys.exit(0)
    init_db(build_engine(DATABASE_URL), drop_first=drop)
