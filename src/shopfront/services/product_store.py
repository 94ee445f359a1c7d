"""Product store — the JSON file of record shared by admin and shop.

Learn: The whole product list is one unit of persistence. Every request
path calls load() before acting and every mutating path calls save() with
the full, recomputed list afterwards. There is no partial write.

load() never fails: a missing or unreadable file, or one that is not a
JSON list, is logged and replaced by the seed collection. Inside a list,
each record is checked on its own; invalid records are logged and skipped
and the others are kept. save() writes to a temp file in the same
directory and renames it over the target, so a concurrent reader sees
either the old document or the new one, never half of it.

The store does no locking. CatalogService serializes load → compute → save.
"""

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from shopfront.schemas.product import Product

logger = structlog.get_logger()


SEED_PRODUCTS: tuple[dict, ...] = (
    {
        "id": 1,
        "name": "Товар 1",
        "price": 100,
        "description": "Описание товара 1",
        "categories": ["Электроника"],
    },
    {
        "id": 2,
        "name": "Товар 2",
        "price": 200,
        "description": "Описание товара 2",
        "categories": ["Одежда"],
    },
)


class StorageUnavailable(Exception):
    """Raised when the products file cannot be read or parsed."""
    pass


def seed_products() -> list[Product]:
    """Fresh copy of the fallback collection."""
    return [Product(**p) for p in SEED_PRODUCTS]


def dumps(products: list[Product]) -> str:
    """Serialize a collection the way it is written to disk (pretty-printed)."""
    return json.dumps(
        [p.model_dump() for p in products],
        indent=2,
        ensure_ascii=False,
    )


class ProductStore:
    """Load and save the full product collection from one JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    # ─── Read ───────────────────────────────────────────

    async def load(self) -> list[Product]:
        """Return the current collection, or the seed if the file is unusable."""
        try:
            return await asyncio.to_thread(self._read)
        except StorageUnavailable as e:
            logger.warning(
                "store.load_failed",
                path=str(self.path),
                error=str(e),
                fallback="seed",
            )
            return seed_products()

    def _read(self) -> list[Product]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageUnavailable(f"cannot read {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageUnavailable(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise StorageUnavailable(f"{self.path} does not hold a list of products")
        return self._valid_records(data)

    def _valid_records(self, records: list) -> list[Product]:
        """Keep every record that is a valid Product with an unseen id.

        Invalid records are logged and left out; the rest of the catalog
        survives.
        """
        products: list[Product] = []
        seen: set[int] = set()
        for index, record in enumerate(records):
            try:
                product = Product.model_validate(record)
            except ValidationError as e:
                logger.warning(
                    "store.record_skipped",
                    path=str(self.path),
                    index=index,
                    error=e.errors()[0]["msg"],
                )
                continue
            if product.id in seen:
                logger.warning(
                    "store.record_skipped",
                    path=str(self.path),
                    index=index,
                    error=f"duplicate id {product.id}",
                )
                continue
            seen.add(product.id)
            products.append(product)
        return products

    async def status(self) -> str:
        """Health probe: "ok", "missing", or "error: <reason>"."""
        if not self.path.exists():
            return "missing"
        try:
            await asyncio.to_thread(self._read)
        except StorageUnavailable as e:
            return f"error: {e}"
        return "ok"

    # ─── Write ──────────────────────────────────────────

    async def save(self, products: list[Product]) -> None:
        """Replace the file with the given collection. Errors propagate."""
        await asyncio.to_thread(self._write, dumps(products))
        logger.debug("store.saved", path=str(self.path), count=len(products))

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp)
            raise

    async def ensure(self) -> bool:
        """Create the file from the current load() result if it is missing.

        Returns True when a file was written.
        """
        if self.path.exists():
            return False
        products = await self.load()
        await self.save(products)
        logger.info("store.initialized", path=str(self.path), count=len(products))
        return True
