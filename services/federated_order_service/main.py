from typing import Optional

from fastapi import FastAPI

from shared.config.database import Database
from shared.config.settings import Settings, get_settings
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from .clients import ProductCatalogClient, UserDirectoryClient, build_http_client
from .models import Base
from .router import router, public_router
from .service import FederatedOrderService


def create_federated_order_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    users: Optional[UserDirectoryClient] = None,
    products: Optional[ProductCatalogClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.order_database_url, echo=settings.db_echo, pool_size=settings.db_pool_size)
    timeout = settings.collaborator_timeout_seconds
    users = users or UserDirectoryClient(build_http_client(settings.user_service_url, timeout))
    products = products or ProductCatalogClient(build_http_client(settings.product_service_url, timeout))

    order_app = FastAPI(title="Order Service", version="1.0.0")
    order_app.state.database = database
    order_app.state.order_service = FederatedOrderService(users, products)

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(order_app, "order_service", settings)
    register_exception_handlers(order_app)

    order_app.include_router(public_router)
    order_app.include_router(router)

    @order_app.on_event("startup")
    async def startup_event():
        await database.create_all(Base)

    @order_app.on_event("shutdown")
    async def shutdown_event():
        await users.aclose()
        await products.aclose()
        await database.dispose()

    return order_app


federated_order_app = create_federated_order_app()
