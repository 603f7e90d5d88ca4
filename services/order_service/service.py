"""
Cart-to-order placement and cancellation against the single storefront
database.

Both operations run inside one unit of work: every read that feeds a
decision and every write that follows from it commit or roll back together.
Product rows are locked while the stock check runs, and the decrement itself
is guarded (``stock_quantity >= quantity``), so two placements contending for
the same product can never both succeed past the available stock.
"""
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import EmptyCart, InsufficientStock, OrderNotFound, StateError
from shared.money import line_total
from shared.observability import (
    ecomm_order_cancellation_total,
    ecomm_order_placement_duration_seconds,
    ecomm_order_placement_total,
    ecomm_stock_units_restored_total,
)
from services.cart_service.repository import CartRepository
from services.product_service.repository import ProductRepository
from .models import Order, OrderItem, OrderStatus
from .repository import OrderRepository
from .schemas import (
    OrderCreate,
    OrderDetailResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderSummary,
)

logger = structlog.get_logger(__name__)


class OrderService:
    @staticmethod
    async def create_order(db: AsyncSession, user_id: int, data: OrderCreate) -> Order:
        """Convert the account's cart into a pending order.

        Prices are snapshotted from the locked product rows; later catalog
        changes never alter the stored total or line prices.
        """
        log = logger.bind(user_id=user_id)
        try:
            with ecomm_order_placement_duration_seconds.time():
                async with unit_of_work(db):
                    rows = await CartRepository.lock_with_products(db, user_id)
                    if not rows:
                        raise EmptyCart()

                    for entry, product in rows:
                        if product.stock_quantity < entry.quantity:
                            raise InsufficientStock(product.name, product.stock_quantity)

                    total = sum(
                        (line_total(product.price, entry.quantity) for entry, product in rows),
                        Decimal("0.00"),
                    )

                    order = Order(
                        user_id=user_id,
                        total_amount=total,
                        shipping_address=data.shipping_address,
                        payment_method=data.payment_method,
                        status=OrderStatus.PENDING.value,
                        items=[
                            OrderItem(product_id=product.id, quantity=entry.quantity, price=product.price)
                            for entry, product in rows
                        ],
                    )
                    await OrderRepository.create_order(db, order)

                    for entry, product in rows:
                        if not await ProductRepository.reduce_stock(db, product.id, entry.quantity):
                            # Another placement drained the row after our read
                            await db.refresh(product, ["stock_quantity"])
                            raise InsufficientStock(product.name, product.stock_quantity)

                    await CartRepository.clear_cart(db, user_id)
        except EmptyCart:
            ecomm_order_placement_total.labels(status="empty_cart").inc()
            raise
        except InsufficientStock as exc:
            ecomm_order_placement_total.labels(status="insufficient_stock").inc()
            log.info("order_rejected", reason="insufficient_stock", product=exc.product_name, available=exc.available)
            raise
        except Exception:
            ecomm_order_placement_total.labels(status="failed").inc()
            raise

        ecomm_order_placement_total.labels(status="success").inc()
        log.info("order_placed", order_id=order.id, total=str(order.total_amount), lines=len(order.items))
        return order

    @staticmethod
    async def cancel_order(db: AsyncSession, user_id: int, order_id: int) -> Order:
        """pending -> cancelled, restoring exactly the quantities deducted."""
        try:
            async with unit_of_work(db):
                order = await OrderRepository.get_owned_order(db, user_id, order_id, for_update=True)
                if not order:
                    raise OrderNotFound()
                if order.status != OrderStatus.PENDING.value:
                    raise StateError("Only pending orders can be cancelled")

                restored = 0
                for item in order.items:
                    await ProductRepository.restore_stock(db, item.product_id, item.quantity)
                    restored += item.quantity

                order.status = OrderStatus.CANCELLED.value
        except OrderNotFound:
            ecomm_order_cancellation_total.labels(status="not_found").inc()
            raise
        except StateError:
            ecomm_order_cancellation_total.labels(status="invalid_state").inc()
            raise

        ecomm_order_cancellation_total.labels(status="success").inc()
        ecomm_stock_units_restored_total.inc(restored)
        logger.info("order_cancelled", user_id=user_id, order_id=order_id, units_restored=restored)
        return order

    @staticmethod
    async def list_orders(db: AsyncSession, user_id: int) -> OrderListResponse:
        rows = await OrderRepository.list_for_user(db, user_id)
        orders = []
        for order, item_count in rows:
            summary = OrderSummary.model_validate(order)
            summary.item_count = item_count
            orders.append(summary)
        return OrderListResponse(orders=orders)

    @staticmethod
    async def get_order(db: AsyncSession, user_id: int, order_id: int) -> OrderDetailResponse:
        order = await OrderRepository.get_owned_order(db, user_id, order_id)
        if not order:
            raise OrderNotFound()

        rows = await OrderRepository.get_items_with_products(db, order_id)
        items = [
            OrderItemResponse(
                id=item.id,
                product_id=item.product_id,
                name=name,
                quantity=item.quantity,
                price=item.price,
            )
            for item, name in rows
        ]
        summary = OrderSummary.model_validate(order)
        summary.item_count = len(items)
        return OrderDetailResponse(order=summary, items=items)
