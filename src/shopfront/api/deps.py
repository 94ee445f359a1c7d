"""Request dependencies — services live on app.state, built by the app factory."""

from fastapi import Request

from shopfront.services.catalog_service import CatalogService
from shopfront.services.product_store import ProductStore


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog
