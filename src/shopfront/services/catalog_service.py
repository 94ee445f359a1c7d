"""Catalog service — product CRUD shared by the admin and shop front ends.

Learn: Every call re-reads the file through ProductStore; nothing is
cached in memory. Mutations run load → compute → save inside a single
asyncio.Lock per products file, so two requests that interleave at the
file I/O awaits cannot both compute the same next id or overwrite each
other's edits. Reads skip the lock: saves are atomic renames, so a reader
always sees a complete collection.

ID rule: max(existing ids) + 1, or 1 for an empty collection.
"""

import asyncio
import math
import re
from pathlib import Path
from typing import Any, Iterable

import structlog
from pydantic import ValidationError

from shopfront.schemas.product import (
    Product,
    ProductCreate,
    ProductNameDescription,
    ProductNamePrice,
    ProductUpdate,
)
from shopfront.services.product_store import ProductStore

logger = structlog.get_logger()


class InvalidInput(Exception):
    """Raised when create/batch input is missing required fields or malformed."""
    pass


class NotFound(Exception):
    """Raised when an operation targets a product id that does not exist."""
    pass


# ═══════════════════════════════════════════════════════════
# Mutation locks
# ═══════════════════════════════════════════════════════════

_LOCKS: dict[Path, asyncio.Lock] = {}


def _mutation_lock(path: Path) -> asyncio.Lock:
    """One lock per products file, shared by every service on that file."""
    key = path.resolve()
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]


# ═══════════════════════════════════════════════════════════
# Field helpers
# ═══════════════════════════════════════════════════════════

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_price(value: Any) -> int:
    """Normalize a price to a non-negative integer.

    Strings are read up to the first non-digit ("50" → 50, "12.7" → 12,
    "7 rub" → 7). Floats are truncated. Anything without a leading integer
    is rejected instead of being stored as a non-number.
    """
    if isinstance(value, bool):
        raise InvalidInput("price must be a number")
    if isinstance(value, int):
        price = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidInput("price must be a finite number")
        price = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            raise InvalidInput(f"price must be a number, got {value!r}")
        try:
            price = int(match.group(1))
        except ValueError as e:
            raise InvalidInput("price is too large") from e
    else:
        raise InvalidInput(f"price must be a number, got {type(value).__name__}")

    if price < 0:
        raise InvalidInput("price must not be negative")
    return price


def next_id(products: Iterable[Product]) -> int:
    return max((p.id for p in products), default=0) + 1


def _as_create(item: Any, where: str = "") -> ProductCreate:
    if isinstance(item, ProductCreate):
        return item
    try:
        return ProductCreate.model_validate(item)
    except ValidationError as e:
        raise InvalidInput(f"{where}invalid product: {e.errors()[0]['msg']}") from e


def _as_update(item: Any) -> ProductUpdate:
    if isinstance(item, ProductUpdate):
        return item
    try:
        return ProductUpdate.model_validate(item)
    except ValidationError as e:
        raise InvalidInput(f"invalid update: {e.errors()[0]['msg']}") from e


def _build_product(product_id: int, data: ProductCreate, where: str = "") -> Product:
    """Validate required fields and apply create defaults."""
    if not data.name or data.price is None or data.price == "":
        raise InvalidInput(f"{where}name and price are required")
    try:
        price = parse_price(data.price)
    except InvalidInput as e:
        raise InvalidInput(f"{where}{e}") from e
    return Product(
        id=product_id,
        name=data.name,
        price=price,
        description=data.description or "",
        categories=list(data.categories or []),
    )


def _index_of(products: list[Product], product_id: int) -> int | None:
    for i, p in enumerate(products):
        if p.id == product_id:
            return i
    return None


# ═══════════════════════════════════════════════════════════
# Service
# ═══════════════════════════════════════════════════════════


class CatalogService:
    """Product CRUD on top of a ProductStore."""

    def __init__(self, store: ProductStore):
        self.store = store
        self._lock = _mutation_lock(store.path)

    # ─── Reads ──────────────────────────────────────────

    async def list_products(self) -> list[Product]:
        return await self.store.load()

    async def get_product(self, product_id: int) -> Product | None:
        products = await self.store.load()
        index = _index_of(products, product_id)
        return products[index] if index is not None else None

    async def find_by_category(self, category: str) -> list[Product]:
        """Products whose category list contains `category`, in stored order."""
        products = await self.store.load()
        return [p for p in products if category in p.categories]

    async def names_and_prices(self) -> list[ProductNamePrice]:
        products = await self.store.load()
        return [ProductNamePrice(id=p.id, name=p.name, price=p.price) for p in products]

    async def names_and_descriptions(self) -> list[ProductNameDescription]:
        products = await self.store.load()
        return [
            ProductNameDescription(id=p.id, name=p.name, description=p.description)
            for p in products
        ]

    # ─── Create ─────────────────────────────────────────

    async def create_product(self, data: ProductCreate | dict) -> Product:
        data = _as_create(data)
        async with self._lock:
            products = await self.store.load()
            product = _build_product(next_id(products), data)
            products.append(product)
            await self.store.save(products)

        logger.info("catalog.product_created", product_id=product.id, name=product.name)
        return product

    async def create_products(self, items: Any) -> list[Product]:
        """Batch insert: one base id, ids assigned as base + index, one save.

        Every item is validated before anything is written.
        """
        if not isinstance(items, (list, tuple)) or not items:
            raise InvalidInput("a non-empty list of products is required")
        parsed = [_as_create(item, f"item {i}: ") for i, item in enumerate(items)]

        async with self._lock:
            products = await self.store.load()
            base = next_id(products)
            added = [
                _build_product(base + i, data, f"item {i}: ")
                for i, data in enumerate(parsed)
            ]
            products.extend(added)
            await self.store.save(products)

        logger.info(
            "catalog.products_created",
            count=len(added),
            first_id=added[0].id,
            last_id=added[-1].id,
        )
        return added

    # ─── Update ─────────────────────────────────────────

    async def update_product(self, product_id: int, changes: ProductUpdate | dict) -> Product:
        """Merge the supplied fields into an existing product.

        Falsy name/price/categories keep the stored value, so an empty
        categories list does not clear them. description is replaced
        whenever it is supplied, including with "".
        """
        changes = _as_update(changes)
        price = parse_price(changes.price) if changes.price else None

        async with self._lock:
            products = await self.store.load()
            index = _index_of(products, product_id)
            if index is None:
                raise NotFound(f"Product {product_id} not found")

            current = products[index]
            updated = current.model_copy(update={
                "name": changes.name or current.name,
                "price": price if price is not None else current.price,
                "description": (
                    changes.description
                    if changes.description is not None
                    else current.description
                ),
                "categories": list(changes.categories or current.categories),
            })
            products[index] = updated
            await self.store.save(products)

        logger.info("catalog.product_updated", product_id=product_id)
        return updated

    # ─── Delete ─────────────────────────────────────────

    async def delete_product(self, product_id: int) -> Product:
        async with self._lock:
            products = await self.store.load()
            index = _index_of(products, product_id)
            if index is None:
                raise NotFound(f"Product {product_id} not found")
            removed = products.pop(index)
            await self.store.save(products)

        logger.info("catalog.product_deleted", product_id=product_id)
        return removed
