"""FastAPI application factories for the admin editor and the storefront.

Learn: Both apps are built the same way: one ProductStore on the
configured file, one CatalogService on top of it, attached to app.state
so routes reach them through dependencies. The shop app also owns the
BroadcastHub for the support chat.

Services are attached in the factory. The lifespan only does start-up
I/O and logging.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopfront import __version__
from shopfront.api import admin_router, shop_router
from shopfront.config import settings
from shopfront.middleware.request_id import RequestIdMiddleware
from shopfront.middleware.security import SecurityHeadersMiddleware
from shopfront.realtime.hub import BroadcastHub
from shopfront.realtime.websocket import router as ws_router
from shopfront.services.catalog_service import CatalogService
from shopfront.services.product_store import ProductStore

logger = structlog.get_logger()


@asynccontextmanager
async def admin_lifespan(app: FastAPI):
    """Make sure the products file exists before the editor serves requests."""
    store: ProductStore = app.state.store
    logger.info(
        "admin.starting",
        version=__version__,
        environment=settings.environment,
        products_file=str(store.path),
    )
    await store.ensure()
    yield
    logger.info("admin.shutdown")


@asynccontextmanager
async def shop_lifespan(app: FastAPI):
    store: ProductStore = app.state.store
    logger.info(
        "shop.starting",
        version=__version__,
        environment=settings.environment,
        products_file=str(store.path),
    )
    yield
    hub: BroadcastHub = app.state.hub
    logger.info("shop.shutdown", open_connections=len(hub))


def _build_app(title: str, description: str, lifespan, products_file: Path | str | None) -> FastAPI:
    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    store = ProductStore(products_file or settings.products_file)
    app.state.store = store
    app.state.catalog = CatalogService(store)
    return app


def create_admin_app(products_file: Path | str | None = None) -> FastAPI:
    """Build the admin product editor."""
    app = _build_app(
        "Shopfront Admin",
        "Product editor: create, batch-create, update and delete products",
        admin_lifespan,
        products_file,
    )
    app.include_router(admin_router)
    return app


def create_shop_app(products_file: Path | str | None = None) -> FastAPI:
    """Build the storefront with the support chat WebSocket."""
    app = _build_app(
        "Shopfront",
        "Storefront product catalog and support chat",
        shop_lifespan,
        products_file,
    )
    app.state.hub = BroadcastHub(
        sender=settings.chat_sender,
        welcome_text=settings.chat_welcome_text,
    )
    app.include_router(shop_router)
    app.include_router(ws_router)
    return app


# Default instances (used by uvicorn: shopfront.main:admin_app / shop_app)
admin_app = create_admin_app()
shop_app = create_shop_app()
