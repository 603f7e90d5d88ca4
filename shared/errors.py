"""
Error taxonomy shared by every service.

Services raise these instead of HTTPException so the same failure maps to
the same status code whether it surfaces from the storefront or from the
federated order service. The handlers registered by
register_exception_handlers() render every failure as

    {"success": false, "error": "<code>", "message": "<human text>"}
"""
from decimal import Decimal

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "An internal server error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    default_message = "Validation error"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
    default_message = "Resource already exists"


class StateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_state"
    default_message = "Operation not allowed in the current state"


class DependencyUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "service_unavailable"
    default_message = "A required service is unavailable"


class InternalError(AppError):
    pass


# --- Order workflow errors ---

class EmptyCart(ValidationError):
    error = "empty_cart"
    default_message = "Cart is empty"


class InsufficientStock(ValidationError):
    error = "insufficient_stock"

    def __init__(self, product_name: str, available: int):
        self.product_name = product_name
        self.available = available
        super().__init__(f"Insufficient stock for {product_name}. Available: {available}")


class OrderNotFound(NotFoundError):
    default_message = "Order not found"


# --- Collaborator errors (federated workflow) ---

class CollaboratorError(AppError):
    """Base for failures fetching from the user or product collaborator."""


class UserNotFound(NotFoundError, CollaboratorError):
    default_message = "User not found"


class ProductNotFound(NotFoundError, CollaboratorError):
    default_message = "Product not found"


class UserServiceUnavailable(DependencyUnavailable, CollaboratorError):
    default_message = "User service unavailable"


class ProductServiceUnavailable(DependencyUnavailable, CollaboratorError):
    default_message = "Product service unavailable"


def error_body(error: str, message: str, **extra) -> dict:
    return {"success": False, "error": error, "message": message, **extra}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("request_failed", path=request.url.path, error=exc.error, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error, exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = jsonable_encoder(exc.errors(), custom_encoder={Decimal: str, ValueError: str})
    first = details[0]["msg"] if details else "Validation error"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("validation_error", first, errors=details),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("http_error", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Full detail goes to the log, never to the caller
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(InternalError.error, InternalError.default_message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
