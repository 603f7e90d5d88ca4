import os
import warnings
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _postgres_url(db_name: str) -> str:
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    host = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
    port = os.getenv("POSTGRES_PORT", "5433")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"


@dataclass(frozen=True)
class Settings:
    database_url: str
    user_database_url: str
    catalog_database_url: str
    order_database_url: str
    db_echo: bool = False
    db_pool_size: int = 10

    user_service_url: str = "http://localhost:3001"
    product_service_url: str = "http://localhost:3002"
    collaborator_timeout_seconds: float = 5.0

    jwt_secret_key: str = ""
    access_token_expire_minutes: int = 60
    internal_api_key: str = ""

    observability_enabled: bool = True
    otlp_endpoint: str = "http://localhost:4317"
    rate_limit_enabled: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        jwt_secret = os.getenv("JWT_SECRET_KEY", "")
        if not jwt_secret:
            warnings.warn(
                "JWT_SECRET_KEY is not set. Using an insecure development default. "
                "Set this env var in production!",
                stacklevel=2,
            )
            jwt_secret = "insecure-dev-secret-change-me"

        internal_key = os.getenv("INTERNAL_API_KEY", "")
        if not internal_key:
            warnings.warn(
                "INTERNAL_API_KEY is not set. Using an insecure default. "
                "Set this env var in production!",
                stacklevel=2,
            )
            internal_key = "insecure-default-change-me"

        return cls(
            database_url=os.getenv("DATABASE_URL", _postgres_url(os.getenv("POSTGRES_DB", "ecommerce"))),
            user_database_url=os.getenv("USER_DATABASE_URL", _postgres_url("userdb")),
            catalog_database_url=os.getenv("CATALOG_DATABASE_URL", _postgres_url("productdb")),
            order_database_url=os.getenv("ORDER_DATABASE_URL", _postgres_url("orderdb")),
            db_echo=_env_bool("DB_ECHO", False),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            user_service_url=os.getenv("USER_SERVICE_URL", "http://localhost:3001"),
            product_service_url=os.getenv("PRODUCT_SERVICE_URL", "http://localhost:3002"),
            collaborator_timeout_seconds=float(os.getenv("COLLABORATOR_TIMEOUT_SECONDS", "5.0")),
            jwt_secret_key=jwt_secret,
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")),
            internal_api_key=internal_key,
            observability_enabled=_env_bool("OBSERVABILITY_ENABLED", True),
            otlp_endpoint=os.getenv("OTLP_ENDPOINT", "http://localhost:4317"),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
