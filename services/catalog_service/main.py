from typing import Optional

from fastapi import FastAPI

from shared.config.database import Database
from shared.config.settings import Settings, get_settings
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from .models import Base
from .router import router, public_router


def create_catalog_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.catalog_database_url, echo=settings.db_echo, pool_size=settings.db_pool_size)

    catalog_app = FastAPI(title="Catalog Service", version="1.0.0")
    catalog_app.state.database = database

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(catalog_app, "catalog_service", settings)
    register_exception_handlers(catalog_app)

    catalog_app.include_router(public_router)
    catalog_app.include_router(router)

    @catalog_app.on_event("startup")
    async def startup_event():
        await database.create_all(Base)

    @catalog_app.on_event("shutdown")
    async def shutdown_event():
        await database.dispose()

    return catalog_app


catalog_app = create_catalog_app()
