"""API route aggregation.

Learn: Two front ends, two routers. Both carry /health; the admin router
adds the product editor, the shop router adds the storefront reads. The
chat WebSocket route lives in shopfront.realtime and is mounted by the
shop app factory.
"""

from fastapi import APIRouter

from shopfront.api.admin import router as admin_products_router
from shopfront.api.health import router as health_router
from shopfront.api.shop import router as shop_products_router

admin_router = APIRouter()
admin_router.include_router(health_router, tags=["health"])
admin_router.include_router(admin_products_router, tags=["admin"])

shop_router = APIRouter()
shop_router.include_router(health_router, tags=["health"])
shop_router.include_router(shop_products_router, tags=["shop"])
