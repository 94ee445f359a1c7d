"""Pydantic schemas for products.

`Product` is the stored record. In `ProductCreate` and `ProductUpdate`
every field is optional and `price` accepts any JSON value; required-field
checks and price coercion happen in CatalogService and raise InvalidInput.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Product(BaseModel):
    id: int
    name: str
    price: int = Field(..., ge=0)
    description: str = ""
    categories: list[str] = Field(default_factory=list)

    @field_validator("description", "categories", mode="before")
    @classmethod
    def _null_to_default(cls, value, info):
        if value is None:
            return "" if info.field_name == "description" else []
        return value


class ProductCreate(BaseModel):
    name: Optional[str] = None
    price: Any = None
    description: Optional[str] = None
    categories: Optional[list[str]] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Any = None
    description: Optional[str] = None
    categories: Optional[list[str]] = None


# ─── Read-only projections ──────────────────────────────

class ProductNamePrice(BaseModel):
    id: int
    name: str
    price: int


class ProductNameDescription(BaseModel):
    id: int
    name: str
    description: str
