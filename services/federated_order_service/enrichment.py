import asyncio
from dataclasses import dataclass
from typing import Union

import structlog

from shared.errors import CollaboratorError
from shared.observability import ecomm_order_enrichment_total
from .clients import ProductCatalogClient, UserDirectoryClient
from .models import FederatedOrder
from .schemas import ProductSnapshot, UserSnapshot

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Enriched:
    order: FederatedOrder
    user: UserSnapshot
    product: ProductSnapshot


@dataclass(frozen=True)
class Bare:
    order: FederatedOrder
    reason: str


EnrichmentResult = Union[Enriched, Bare]


async def decorate(
    order: FederatedOrder, users: UserDirectoryClient, products: ProductCatalogClient
) -> EnrichmentResult:
    """Attach current user and product snapshots, or hand the order back bare.

    Collaborator failures never escape from here.
    """
    user, product = await asyncio.gather(
        users.fetch(order.user_id),
        products.fetch(order.product_id),
        return_exceptions=True,
    )
    for outcome in (user, product):
        if isinstance(outcome, CollaboratorError):
            ecomm_order_enrichment_total.labels(result="bare").inc()
            logger.warning("order_enrichment_skipped", order_id=order.id, reason=outcome.message)
            return Bare(order=order, reason=outcome.message)
        if isinstance(outcome, BaseException):
            raise outcome

    ecomm_order_enrichment_total.labels(result="enriched").inc()
    return Enriched(order=order, user=user, product=product)
