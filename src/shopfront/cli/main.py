"""Shopfront CLI — run the servers and edit products from the terminal.

Usage:
    shopfront admin                          # Run the admin editor (port 8082)
    shopfront shop                           # Run the storefront + chat (port 3000)
    shopfront seed                           # Create the products file if missing
    shopfront products                       # List products via the admin API
    shopfront add "Widget" 50 -c Tools       # Create a product
    shopfront delete 3                       # Delete a product
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx
import uvicorn

from shopfront import __version__
from shopfront.config import settings
from shopfront.logconfig import configure_logging

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_ADMIN_URL = "http://localhost:8082"


def _admin_url() -> str:
    return os.environ.get("SHOPFRONT_ADMIN_URL", DEFAULT_ADMIN_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the admin server."""
    return httpx.AsyncClient(base_url=_admin_url(), timeout=10.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous click handler.

    Inside an already running loop (e.g. CliRunner in async tests) the
    coroutine is offloaded to a thread with its own loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(_cell(row.get(k), w) for _, k, w in columns)
        click.echo(line)


def _cell(value, width: int) -> str:
    if isinstance(value, list):
        value = ", ".join(value)
    text = "—" if value in (None, "") else str(value)
    return text[:width].ljust(width)


def _fail(resp: httpx.Response) -> None:
    """Print the API error detail and exit non-zero."""
    try:
        detail = resp.json().get("detail", resp.text)
    except ValueError:
        detail = resp.text
    click.secho(f"Error {resp.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _serve(app, port: int, host: Optional[str]):
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(app, host=host or settings.host, port=port, log_config=None)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

_products_file_option = click.option(
    "--products-file",
    "-f",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Products JSON file (default: SHOPFRONT_PRODUCTS_FILE)",
)


@click.group()
@click.version_option(version=__version__, prog_name="shopfront")
def main():
    """Shopfront — product catalog admin, storefront and support chat."""


# ---------------------------------------------------------------------------
# Servers
# ---------------------------------------------------------------------------


@main.command()
@_products_file_option
@click.option("--port", "-p", type=int, default=None, help="Port (default: SHOPFRONT_ADMIN_PORT)")
@click.option("--host", default=None, help="Bind address")
def admin(products_file: Optional[Path], port: Optional[int], host: Optional[str]):
    """Run the admin product editor."""
    from shopfront.main import create_admin_app

    _serve(create_admin_app(products_file), port or settings.admin_port, host)


@main.command()
@_products_file_option
@click.option("--port", "-p", type=int, default=None, help="Port (default: SHOPFRONT_SHOP_PORT)")
@click.option("--host", default=None, help="Bind address")
def shop(products_file: Optional[Path], port: Optional[int], host: Optional[str]):
    """Run the storefront with the support chat WebSocket at /ws."""
    from shopfront.main import create_shop_app

    _serve(create_shop_app(products_file), port or settings.shop_port, host)


@main.command()
@_products_file_option
def seed(products_file: Optional[Path]):
    """Create the products file with the sample products if it is missing."""
    from shopfront.services.product_store import ProductStore

    store = ProductStore(products_file or settings.products_file)
    if _run(store.ensure()):
        click.secho(f"Created {store.path}", fg="green")
    else:
        click.echo(f"{store.path} already exists")


# ---------------------------------------------------------------------------
# Product commands (talk to a running admin server)
# ---------------------------------------------------------------------------


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def products(as_json: bool):
    """List all products."""
    _run(_products_impl(as_json))


async def _products_impl(as_json: bool):
    async with _client() as c:
        r = await c.get("/api/admin/products")
        if r.is_error:
            _fail(r)
        items = r.json()

    if as_json:
        click.echo(_pretty_json(items))
        return
    if not items:
        click.echo("No products.")
        return

    click.secho(f"Products ({len(items)}):", bold=True)
    click.echo()
    _print_table(items, [
        ("ID", "id", 5),
        ("Name", "name", 24),
        ("Price", "price", 8),
        ("Categories", "categories", 30),
    ])


@main.command()
@click.argument("name")
@click.argument("price")
@click.option("--description", "-d", default="", help="Product description")
@click.option("--category", "-c", "categories", multiple=True, help="Category (repeatable)")
def add(name: str, price: str, description: str, categories: tuple[str, ...]):
    """Create a product NAME with PRICE."""
    _run(_add_impl(name, price, description, list(categories)))


async def _add_impl(name: str, price: str, description: str, categories: list[str]):
    async with _client() as c:
        r = await c.post("/api/admin/products", json={
            "name": name,
            "price": price,
            "description": description,
            "categories": categories,
        })
        if r.is_error:
            _fail(r)
        product = r.json()
    click.secho(f"Product #{product['id']} created: {product['name']} ({product['price']})", fg="green")


@main.command()
@click.argument("product_id", type=int)
def delete(product_id: int):
    """Delete product PRODUCT_ID."""
    _run(_delete_impl(product_id))


async def _delete_impl(product_id: int):
    async with _client() as c:
        r = await c.delete(f"/api/admin/products/{product_id}")
        if r.is_error:
            _fail(r)
        product = r.json()
    click.secho(f"Product #{product['id']} deleted: {product['name']}", fg="yellow")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
