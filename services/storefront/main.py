"""
Storefront: accounts, catalog, cart and transactional orders.

All four routers share one database so that order placement and
cancellation can run as a single transaction across products, cart and
orders.
"""
from typing import Optional

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import Base, Database
from shared.config.settings import Settings, get_settings
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.schemas import HealthResponse
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.auth_service import models as account_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.cart_service import models as cart_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401

from services.auth_service.router import router as auth_router
from services.product_service.router import router as product_router, admin_router as product_admin_router
from services.cart_service.router import router as cart_router
from services.order_service.router import router as order_router


def create_storefront_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.db_echo, pool_size=settings.db_pool_size)

    app = FastAPI(title="Storefront", version="1.0.0")
    app.state.database = database

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "storefront", settings)

    # --- SECURITY SETUP ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(product_admin_router)
    app.include_router(cart_router)
    app.include_router(order_router)

    @app.get("/health", response_model=HealthResponse, include_in_schema=False)
    async def health_check():
        return HealthResponse(service="storefront")

    @app.on_event("startup")
    async def startup_event():
        await database.create_all(Base)

    @app.on_event("shutdown")
    async def shutdown_event():
        await database.dispose()

    return app


storefront_app = create_storefront_app()
