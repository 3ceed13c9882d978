"""
ParuShop - Application Entry Point
===================================
App factory: application context, middleware, exception handlers, routers.

Run with:
    uvicorn main:create_app --factory --port 8005
    python main.py
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings as config
from config.settings import Settings, load_settings
from config.context import AppContext
from config.database import Base
from common.exceptions import ShopError, InternalError
from common.helpers import get_real_ip
from common.responses import api_response, error_response

logger = logging.getLogger("parushop.app")
request_logger = logging.getLogger("parushop.request")

# ==========================================
# Import ALL models so Base.metadata sees them
# ==========================================
from modules.user.models import User  # noqa: F401,E402
from modules.catalog.models import Product, ProductVariant, ProductImage  # noqa: F401,E402
from modules.review.models import ProductReview  # noqa: F401,E402
from modules.cart.models import Cart, CartItem  # noqa: F401,E402

# ==========================================
# Import routers
# ==========================================
from modules.auth.routes import router as auth_router  # noqa: E402
from modules.catalog.routes import router as catalog_router  # noqa: E402
from modules.cart.routes import router as cart_router  # noqa: E402

_SKIP_LOG_PATHS = ("/health", "/favicon.ico")


# ==========================================
# Exception handlers: everything -> envelope
# ==========================================

async def shop_error_handler(request: Request, exc: ShopError):
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{loc}: {first.get('msg')}" if loc else first.get("msg", message)
    return error_response(400, message, errors=errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    err = InternalError()
    return error_response(err.status_code, err.message)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    err = InternalError()
    return error_response(err.status_code, err.message)


# ==========================================
# Create App
# ==========================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    ctx = AppContext.build(settings)

    @asynccontextmanager
    async def lifespan(app):
        # Auto-create any missing tables (safe for existing tables)
        Base.metadata.create_all(bind=ctx.engine)
        logger.info("%s %s started (db: %s)", config.APP_NAME, config.APP_VERSION, ctx.engine.url.get_backend_name())
        yield
        ctx.engine.dispose()
        logger.info("%s stopped", config.APP_NAME)

    app = FastAPI(
        title=f"{config.APP_NAME} API",
        description="Product catalog, shopping cart and user accounts",
        version=config.APP_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.ctx = ctx

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with status and timing."""
        if request.url.path in _SKIP_LOG_PATHS:
            return await call_next(request)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        request_logger.info(
            "%s %s from %s -> %s (%dms)",
            request.method, request.url.path, get_real_ip(request), response.status_code, elapsed_ms,
        )
        return response

    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ==========================================
    # Register Routers
    # ==========================================
    app.include_router(catalog_router, prefix=settings.api_prefix)
    app.include_router(cart_router, prefix=settings.api_prefix)
    app.include_router(auth_router, prefix=settings.api_prefix)

    @app.get(settings.api_prefix)
    async def api_root():
        p = settings.api_prefix
        return api_response({
            "apiVersion": config.APP_VERSION,
            "endpoints": {
                "products": f"{p}/products",
                "productById": f"{p}/products/:id",
                "cart": f"{p}/cart",
                "users": f"{p}/users",
            },
        }, f"Welcome to {config.APP_NAME} API")

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": config.APP_VERSION}

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=config.PORT)
