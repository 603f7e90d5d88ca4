"""
Order placement across service boundaries.

The order store, the user directory and the product catalog are three
independent stores with no shared transaction. Collaborator reads happen
before anything is written, so a failed read leaves no trace and needs no
compensation. Enrichment on reads is best-effort: it reflects the
collaborators' *current* state, while quantity and total stay as persisted.
"""
import asyncio
from typing import List, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import OrderNotFound, StateError, ValidationError
from shared.money import line_total
from .clients import ProductCatalogClient, UserDirectoryClient
from .enrichment import Enriched, EnrichmentResult, decorate
from .models import FederatedOrder, FederatedOrderStatus
from .repository import FederatedOrderRepository
from .schemas import FederatedOrderCreate, FederatedOrderUpdate, ProductSnapshot, UserSnapshot

logger = structlog.get_logger(__name__)

_PENDING = FederatedOrderStatus.PENDING.value
_PROCESSING = FederatedOrderStatus.PROCESSING.value
_COMPLETED = FederatedOrderStatus.COMPLETED.value
_CANCELLED = FederatedOrderStatus.CANCELLED.value

# Forward-only lifecycle; cancellation is reachable from pending alone
ALLOWED_TRANSITIONS = {
    _PENDING: {_PROCESSING, _COMPLETED, _CANCELLED},
    _PROCESSING: {_COMPLETED},
    _COMPLETED: set(),
    _CANCELLED: set(),
}


def check_transition(current: str, requested: str) -> None:
    if requested not in ALLOWED_TRANSITIONS.get(current, set()):
        raise StateError(f"Cannot change order status from {current} to {requested}")


class FederatedOrderService:
    def __init__(self, users: UserDirectoryClient, products: ProductCatalogClient):
        self.users = users
        self.products = products

    async def _fetch_user_and_product(self, user_id: int, product_id: int) -> Tuple[UserSnapshot, ProductSnapshot]:
        # Independent reads; user errors win so the outcome does not depend on timing
        user, product = await asyncio.gather(
            self.users.fetch(user_id),
            self.products.fetch(product_id),
            return_exceptions=True,
        )
        for outcome in (user, product):
            if isinstance(outcome, BaseException):
                raise outcome
        return user, product

    async def decorate(self, order: FederatedOrder) -> EnrichmentResult:
        return await decorate(order, self.users, self.products)

    async def create_order(self, db: AsyncSession, data: FederatedOrderCreate) -> Enriched:
        user, product = await self._fetch_user_and_product(data.userId, data.productId)
        total = line_total(product.price, data.quantity)

        async with unit_of_work(db):
            order = await FederatedOrderRepository.create_order(
                db,
                FederatedOrder(
                    user_id=data.userId,
                    product_id=data.productId,
                    quantity=data.quantity,
                    total_price=total,
                    status=_PENDING,
                ),
            )

        logger.info("federated_order_created", order_id=order.id, user_id=order.user_id, total=str(total))
        return Enriched(order=order, user=user, product=product)

    async def get_order(self, db: AsyncSession, order_id: int) -> EnrichmentResult:
        order = await FederatedOrderRepository.get_order(db, order_id)
        if not order:
            raise OrderNotFound()
        return await self.decorate(order)

    async def list_orders(self, db: AsyncSession) -> List[EnrichmentResult]:
        orders = await FederatedOrderRepository.list_orders(db)
        return list(await asyncio.gather(*(self.decorate(order) for order in orders)))

    async def update_order(self, db: AsyncSession, order_id: int, data: FederatedOrderUpdate) -> EnrichmentResult:
        """Apply a quantity and/or status change.

        A quantity change re-prices the order from the product's current
        price, unlike creation-time pricing elsewhere in the system.
        """
        async with unit_of_work(db):
            current = await FederatedOrderRepository.get_order(db, order_id)
        if not current:
            raise OrderNotFound()

        quantity_changed = data.quantity is not None and data.quantity != current.quantity
        # A supplied status is always written; repeating the current one is a no-op
        if not quantity_changed and data.status is None:
            raise ValidationError("No valid fields to update")
        if data.status is not None and data.status != current.status:
            check_transition(current.status, data.status)

        new_total = None
        if quantity_changed:
            # Fails before anything is written; no partial update survives
            product = await self.products.fetch(current.product_id)
            new_total = line_total(product.price, data.quantity)

        async with unit_of_work(db):
            order = await FederatedOrderRepository.get_order(db, order_id, for_update=True)
            if not order:
                raise OrderNotFound()
            if data.status is not None and data.status != order.status:
                check_transition(order.status, data.status)
                order.status = data.status
            if quantity_changed:
                order.quantity = data.quantity
                order.total_price = new_total

        logger.info(
            "federated_order_updated",
            order_id=order_id,
            quantity_changed=quantity_changed,
            status=order.status,
        )
        return await self.decorate(order)

    async def delete_order(self, db: AsyncSession, order_id: int) -> None:
        async with unit_of_work(db):
            if not await FederatedOrderRepository.delete_order(db, order_id):
                raise OrderNotFound()
