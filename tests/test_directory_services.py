"""User directory and product catalog services, alone and behind the order service."""
import httpx
import pytest
import pytest_asyncio

from shared.config.database import Database
from services.catalog_service.main import create_catalog_app
from services.catalog_service.models import Base as CatalogBase
from services.federated_order_service.clients import ProductCatalogClient, UserDirectoryClient
from services.federated_order_service.main import create_federated_order_app
from services.federated_order_service.models import Base as OrderBase
from services.user_service.main import create_user_app
from services.user_service.models import Base as UserBase


@pytest_asyncio.fixture
async def user_app(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await database.create_all(UserBase)
    yield create_user_app(database=database)
    await database.dispose()


@pytest_asyncio.fixture
async def catalog_app(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await database.create_all(CatalogBase)
    yield create_catalog_app(database=database)
    await database.dispose()


@pytest_asyncio.fixture
async def user_client(user_app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=user_app), base_url="http://users") as client:
        yield client


@pytest_asyncio.fixture
async def catalog_client(catalog_app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=catalog_app), base_url="http://catalog") as client:
        yield client


class TestUserService:
    async def test_crud(self, user_client):
        created = await user_client.post("/users/", json={"name": "Grace Hopper", "email": "Grace@Navy.mil"})
        assert created.status_code == 201
        user_id = created.json()["id"]
        assert created.json()["email"] == "grace@navy.mil"

        assert (await user_client.get(f"/users/{user_id}")).json()["name"] == "Grace Hopper"
        assert len((await user_client.get("/users/")).json()) == 1

        renamed = await user_client.put(f"/users/{user_id}", json={"name": "Rear Admiral Hopper"})
        assert renamed.status_code == 200
        assert renamed.json()["email"] == "grace@navy.mil"

        assert (await user_client.delete(f"/users/{user_id}")).status_code == 204
        missing = await user_client.get(f"/users/{user_id}")
        assert missing.status_code == 404
        assert missing.json()["message"] == "User not found"

    async def test_duplicate_email(self, user_client):
        await user_client.post("/users/", json={"name": "First", "email": "same@example.com"})
        other = await user_client.post("/users/", json={"name": "Second", "email": "other@example.com"})

        duplicate = await user_client.post("/users/", json={"name": "Third", "email": "same@example.com"})
        clash = await user_client.put(f"/users/{other.json()['id']}", json={"email": "same@example.com"})

        assert duplicate.status_code == 409
        assert duplicate.json()["message"] == "Email already exists"
        assert clash.status_code == 409

    @pytest.mark.parametrize(
        "payload",
        [{"name": "X", "email": "x@example.com"}, {"name": "Valid Name", "email": "not-an-email"}, {}],
    )
    async def test_invalid_payloads(self, user_client, payload):
        response = await user_client.post("/users/", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    async def test_empty_update(self, user_client):
        user_id = (await user_client.post("/users/", json={"name": "Someone", "email": "s@example.com"})).json()["id"]

        response = await user_client.put(f"/users/{user_id}", json={})

        assert response.status_code == 400

    async def test_health(self, user_client):
        assert (await user_client.get("/health")).json() == {"service": "user", "status": "running"}


class TestCatalogService:
    async def test_crud(self, catalog_client):
        created = await catalog_client.post("/products/", json={"name": "Globe", "price": "45.00"})
        assert created.status_code == 201
        product_id = created.json()["id"]
        assert created.json()["price"] == 45.0

        updated = await catalog_client.put(f"/products/{product_id}", json={"description": "Antique"})
        assert updated.json()["description"] == "Antique"
        assert updated.json()["price"] == 45.0

        assert len((await catalog_client.get("/products/")).json()) == 1
        assert (await catalog_client.delete(f"/products/{product_id}")).status_code == 204
        assert (await catalog_client.get(f"/products/{product_id}")).status_code == 404

    @pytest.mark.parametrize("price", [0, -5, "abc"])
    async def test_price_must_be_positive(self, catalog_client, price):
        response = await catalog_client.post("/products/", json={"name": "Globe", "price": price})

        assert response.status_code == 400


async def test_order_service_against_live_collaborators(tmp_path, user_app, catalog_app, user_client, catalog_client):
    user_id = (await user_client.post("/users/", json={"name": "Linus", "email": "linus@example.com"})).json()["id"]
    product_id = (await catalog_client.post("/products/", json={"name": "Keyboard", "price": "80.00"})).json()["id"]

    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    users = UserDirectoryClient(httpx.AsyncClient(transport=httpx.ASGITransport(app=user_app), base_url="http://users"))
    products = ProductCatalogClient(
        httpx.AsyncClient(transport=httpx.ASGITransport(app=catalog_app), base_url="http://catalog")
    )
    order_app = create_federated_order_app(database=database, users=users, products=products)
    await database.create_all(OrderBase)

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=order_app), base_url="http://orders") as client:
        created = await client.post("/orders", json={"userId": user_id, "productId": product_id, "quantity": 2})
        assert created.status_code == 201
        assert created.json()["total_price"] == 160.0
        assert created.json()["user"]["name"] == "Linus"

        await catalog_client.delete(f"/products/{product_id}")
        listed = (await client.get("/orders")).json()
        assert len(listed) == 1
        assert listed[0]["enriched"] is False

        missing = await client.post("/orders", json={"userId": user_id, "productId": product_id, "quantity": 1})
        assert missing.status_code == 404
        assert missing.json()["message"] == "Product not found"

    await users.aclose()
    await products.aclose()
    await database.dispose()
