from typing import Optional

from fastapi import FastAPI

from shared.config.database import Database
from shared.config.settings import Settings, get_settings
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from .models import Base
from .router import router, public_router


def create_user_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.user_database_url, echo=settings.db_echo, pool_size=settings.db_pool_size)

    user_app = FastAPI(title="User Service", version="1.0.0")
    user_app.state.database = database

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(user_app, "user_service", settings)
    register_exception_handlers(user_app)

    user_app.include_router(public_router)
    user_app.include_router(router)

    @user_app.on_event("startup")
    async def startup_event():
        await database.create_all(Base)

    @user_app.on_event("shutdown")
    async def shutdown_event():
        await database.dispose()

    return user_app


user_app = create_user_app()
