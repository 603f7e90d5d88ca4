"""
HTTP clients for the two collaborators the federated order service reads
from. A failed call is classified exactly once:

* 404                                   -> ``*NotFound``
* connection error, timeout, other
  non-200 status, unparseable payload   -> ``*ServiceUnavailable``

There are no retries; the first failure is what the caller sees.
"""
from typing import Generic, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from shared.errors import (
    CollaboratorError,
    ProductNotFound,
    ProductServiceUnavailable,
    UserNotFound,
    UserServiceUnavailable,
)
from shared.observability import ecomm_collaborator_requests_total
from shared.security.api_key import internal_api_headers
from .schemas import ProductSnapshot, UserSnapshot

logger = structlog.get_logger(__name__)

SnapshotT = TypeVar("SnapshotT", bound=BaseModel)


def build_http_client(base_url: str, timeout_seconds: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout_seconds),
        headers=internal_api_headers(),
    )


class CollaboratorClient(Generic[SnapshotT]):
    name: str
    path: str
    snapshot: Type[SnapshotT]
    not_found: Type[CollaboratorError]
    unavailable: Type[CollaboratorError]

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def fetch(self, resource_id: int) -> SnapshotT:
        log = logger.bind(collaborator=self.name, resource_id=resource_id)
        try:
            response = await self._http.get(self.path.format(id=resource_id))
        except httpx.HTTPError as exc:
            ecomm_collaborator_requests_total.labels(collaborator=self.name, outcome="unavailable").inc()
            log.warning("collaborator_unreachable", error=repr(exc))
            raise self.unavailable() from exc

        if response.status_code == 404:
            ecomm_collaborator_requests_total.labels(collaborator=self.name, outcome="not_found").inc()
            raise self.not_found()

        if response.status_code != 200:
            ecomm_collaborator_requests_total.labels(collaborator=self.name, outcome="unavailable").inc()
            log.warning("collaborator_bad_status", status_code=response.status_code)
            raise self.unavailable()

        try:
            snapshot = self.snapshot.model_validate(response.json())
        except ValueError as exc:
            ecomm_collaborator_requests_total.labels(collaborator=self.name, outcome="unavailable").inc()
            log.warning("collaborator_bad_payload", error=str(exc))
            raise self.unavailable() from exc

        ecomm_collaborator_requests_total.labels(collaborator=self.name, outcome="ok").inc()
        return snapshot

    async def aclose(self) -> None:
        await self._http.aclose()


class UserDirectoryClient(CollaboratorClient[UserSnapshot]):
    name = "user"
    path = "/users/{id}"
    snapshot = UserSnapshot
    not_found = UserNotFound
    unavailable = UserServiceUnavailable


class ProductCatalogClient(CollaboratorClient[ProductSnapshot]):
    name = "product"
    path = "/products/{id}"
    snapshot = ProductSnapshot
    not_found = ProductNotFound
    unavailable = ProductServiceUnavailable
