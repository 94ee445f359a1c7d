"""Admin product editor routes.

Learn: Routes translate HTTP to CatalogService calls and map its errors:
InvalidInput → 400, NotFound → 404. Request bodies accept any field
values; CatalogService decides what is missing or malformed.

  GET    /api/admin/products          list
  POST   /api/admin/products          create (201)
  POST   /api/admin/products/batch    create many (201)
  PUT    /api/admin/products/{id}     partial update
  DELETE /api/admin/products/{id}     delete, returns the removed product
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from shopfront.api.deps import get_catalog
from shopfront.schemas.product import Product, ProductCreate, ProductUpdate
from shopfront.services.catalog_service import CatalogService, InvalidInput, NotFound

router = APIRouter(prefix="/api/admin/products")


@router.get("", response_model=list[Product])
async def list_products(svc: CatalogService = Depends(get_catalog)):
    return await svc.list_products()


@router.post("", response_model=Product, status_code=201)
async def create_product(body: ProductCreate, svc: CatalogService = Depends(get_catalog)):
    try:
        return await svc.create_product(body)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/batch", response_model=list[Product], status_code=201)
async def create_products(
    body: Any = Body(None),
    svc: CatalogService = Depends(get_catalog),
):
    """Insert several products with consecutive ids in one write."""
    try:
        return await svc.create_products(body)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    svc: CatalogService = Depends(get_catalog),
):
    try:
        return await svc.update_product(product_id, body)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{product_id}", response_model=Product)
async def delete_product(product_id: int, svc: CatalogService = Depends(get_catalog)):
    try:
        return await svc.delete_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
