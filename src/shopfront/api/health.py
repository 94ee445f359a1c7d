"""Health check endpoint.

Learn: Reports the server version and whether the products file can be
read. A missing or broken file still lets the app serve the seed data,
so the status is "degraded" rather than an error response.
"""

from fastapi import APIRouter, Depends

from shopfront import __version__
from shopfront.api.deps import get_store
from shopfront.services.product_store import ProductStore

router = APIRouter()


@router.get("/health")
async def health_check(store: ProductStore = Depends(get_store)):
    """Check server health and products file readability."""
    checks = {"server": "ok", "version": __version__}
    checks["products_file"] = await store.status()

    status = "healthy" if checks["products_file"] == "ok" else "degraded"
    return {"status": status, **checks}
