"""Test fixtures — every test gets its own products file under tmp_path.

Learn: The apps take the products path as a factory argument, so each
test builds fresh admin/shop apps on an isolated file. ASGITransport
drives the HTTP routes in-process without starting a server (and without
running the lifespan, which only does start-up I/O).
"""

import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shopfront.main import create_admin_app, create_shop_app
from shopfront.realtime.hub import BroadcastHub
from shopfront.services.catalog_service import CatalogService
from shopfront.services.product_store import ProductStore


class FakeSocket:
    """Stand-in for a WebSocket: records what the hub sends it."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket is closed")
        self.sent.append(json.loads(data))


@pytest.fixture
def fake_socket():
    """The FakeSocket class, for tests that build sockets directly."""
    return FakeSocket


@pytest.fixture
def products_file(tmp_path):
    return tmp_path / "data" / "products.json"


@pytest.fixture
def store(products_file):
    return ProductStore(products_file)


@pytest_asyncio.fixture()
async def empty_store(store):
    """A store whose file exists and holds an empty list."""
    await store.save([])
    return store


@pytest.fixture
def catalog(empty_store):
    return CatalogService(empty_store)


@pytest.fixture
def hub():
    return BroadcastHub(sender="server", welcome_text="Welcome!")


@pytest.fixture
def admin_app(products_file):
    return create_admin_app(products_file)


@pytest.fixture
def shop_app(products_file):
    return create_shop_app(products_file)


@pytest_asyncio.fixture()
async def admin_client(admin_app):
    transport = ASGITransport(app=admin_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def shop_client(shop_app):
    transport = ASGITransport(app=shop_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
