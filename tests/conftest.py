"""
Shared fixtures.

Environment is pinned before any project module is imported: settings are
cached on first use and the module-level app instances are built at import.
"""
import os

os.environ["OBSERVABILITY_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
for _name in ("DATABASE_URL", "USER_DATABASE_URL", "CATALOG_DATABASE_URL", "ORDER_DATABASE_URL"):
    os.environ[_name] = "sqlite+aiosqlite:///:memory:"

from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import func, select

from shared.config.database import Base, Database, unit_of_work
from shared.security import create_access_token

from services.auth_service.models import Account
from services.cart_service.models import CartEntry
from services.product_service.models import Product
from services.storefront.main import create_storefront_app
from services.federated_order_service.clients import ProductCatalogClient, UserDirectoryClient
from services.federated_order_service.main import create_federated_order_app
from services.federated_order_service.models import Base as FederatedBase

INTERNAL_HEADERS = {"X-Internal-API-Key": "test-internal-key"}


@pytest_asyncio.fixture
async def storefront_db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await database.create_all(Base)
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def storefront_client(storefront_db):
    app = create_storefront_app(database=storefront_db)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://storefront") as client:
        yield client


@pytest.fixture
def seed(storefront_db):
    return StorefrontSeed(storefront_db)


def auth_headers(account_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(account_id)})}"}


class StorefrontSeed:
    """Writes fixture rows straight through the ORM, bypassing the HTTP layer."""

    def __init__(self, database: Database):
        self.database = database

    async def account(self, email: str = "shopper@example.com", full_name: str = "Shopper") -> int:
        async with self.database.session() as db:
            async with unit_of_work(db):
                account = Account(email=email, full_name=full_name, hashed_password="not-a-real-hash")
                db.add(account)
                await db.flush()
                return account.id

    async def product(self, name: str, price: str, stock: int) -> int:
        async with self.database.session() as db:
            async with unit_of_work(db):
                product = Product(name=name, price=Decimal(price), stock_quantity=stock)
                db.add(product)
                await db.flush()
                return product.id

    async def cart_entry(self, user_id: int, product_id: int, quantity: int) -> int:
        async with self.database.session() as db:
            async with unit_of_work(db):
                entry = CartEntry(user_id=user_id, product_id=product_id, quantity=quantity)
                db.add(entry)
                await db.flush()
                return entry.id

    async def stock_of(self, product_id: int) -> int:
        async with self.database.session() as db:
            product = await db.get(Product, product_id)
            return product.stock_quantity

    async def set_price(self, product_id: int, price: str) -> None:
        async with self.database.session() as db:
            async with unit_of_work(db):
                product = await db.get(Product, product_id)
                product.price = Decimal(price)

    async def cart_size(self, user_id: int) -> int:
        async with self.database.session() as db:
            result = await db.execute(select(func.count()).select_from(CartEntry).where(CartEntry.user_id == user_id))
            return result.scalar_one()


class FakeCollaborator:
    """In-memory stand-in for the user directory or product catalog.

    ``failure`` switches the whole collaborator into a broken mode:
    ``"down"`` refuses connections, ``"timeout"`` times out and an int
    answers every request with that status code.
    """

    def __init__(self):
        self.records = {}
        self.failure = None
        self.calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.failure == "down":
            raise httpx.ConnectError("connection refused", request=request)
        if self.failure == "timeout":
            raise httpx.ReadTimeout("timed out", request=request)
        if isinstance(self.failure, int):
            return httpx.Response(self.failure, json={"detail": "boom"})

        resource_id = int(request.url.path.rsplit("/", 1)[-1])
        record = self.records.get(resource_id)
        if record is None:
            return httpx.Response(404, json={"detail": "not found"})
        return httpx.Response(200, json=record)

    def http_client(self, base_url: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), base_url=base_url)


@pytest.fixture
def user_directory():
    directory = FakeCollaborator()
    directory.records[1] = {"id": 1, "name": "Ada Lovelace", "email": "ada@example.com"}
    return directory


@pytest.fixture
def product_catalog():
    catalog = FakeCollaborator()
    catalog.records[7] = {"id": 7, "name": "Desk Lamp", "price": 19.99, "description": "Brass"}
    return catalog


@pytest_asyncio.fixture
async def order_db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    await database.create_all(FederatedBase)
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def order_client(order_db, user_directory, product_catalog):
    users = UserDirectoryClient(user_directory.http_client("http://users"))
    products = ProductCatalogClient(product_catalog.http_client("http://catalog"))
    app = create_federated_order_app(database=order_db, users=users, products=products)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://orders") as client:
        yield client
    await users.aclose()
    await products.aclose()
