"""Storefront read-only product routes."""

from fastapi import APIRouter, Depends, HTTPException

from shopfront.api.deps import get_catalog
from shopfront.schemas.product import Product, ProductNameDescription, ProductNamePrice
from shopfront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/products")


@router.get("", response_model=list[Product])
async def list_products(svc: CatalogService = Depends(get_catalog)):
    return await svc.list_products()


# Fixed paths go before /{product_id}.

@router.get("/names-prices", response_model=list[ProductNamePrice])
async def names_and_prices(svc: CatalogService = Depends(get_catalog)):
    return await svc.names_and_prices()


@router.get("/names-descriptions", response_model=list[ProductNameDescription])
async def names_and_descriptions(svc: CatalogService = Depends(get_catalog)):
    return await svc.names_and_descriptions()


@router.get("/category/{category}", response_model=list[Product])
async def products_by_category(category: str, svc: CatalogService = Depends(get_catalog)):
    return await svc.find_by_category(category)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, svc: CatalogService = Depends(get_catalog)):
    product = await svc.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
