"""
ParuShop - Alembic Environment
===============================
Migrations for the users, catalog, reviews and cart tables.

The URL comes from config.settings (DATABASE_URL or the DB_* parts), so
`alembic upgrade head` targets the same database as the API. SQLite runs in
batch mode because it cannot ALTER constraints in place.
"""

import sys
import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import DATABASE_URL
from config.database import Base

# Every mapped table must be imported for autogenerate
from modules.user.models import User  # noqa: F401
from modules.catalog.models import Product, ProductVariant, ProductImage  # noqa: F401
from modules.review.models import ProductReview  # noqa: F401
from modules.cart.models import Cart, CartItem  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Compare column types too (Numeric precision on prices and totals)
_configure_opts = {"target_metadata": target_metadata, "compare_type": True}


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        render_as_batch=url.startswith("sqlite"),
        **_configure_opts,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            render_as_batch=connection.dialect.name == "sqlite",
            **_configure_opts,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
