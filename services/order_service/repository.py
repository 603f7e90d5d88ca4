from typing import Optional, Sequence

from sqlalchemy import Row, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.models import Product
from .models import Order, OrderItem

class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        db.add(order)
        await db.flush()
        return order

    @staticmethod
    async def get_owned_order(
        db: AsyncSession, user_id: int, order_id: int, for_update: bool = False
    ) -> Optional[Order]:
        query = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int) -> Sequence[Row]:
        item_count = (
            select(func.count(OrderItem.id))
            .where(OrderItem.order_id == Order.id)
            .correlate(Order)
            .scalar_subquery()
        )
        result = await db.execute(
            select(Order, item_count.label("item_count"))
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.all()

    @staticmethod
    async def get_items_with_products(db: AsyncSession, order_id: int) -> Sequence[Row]:
        result = await db.execute(
            select(OrderItem, Product.name)
            .join(Product, OrderItem.product_id == Product.id)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
        )
        return result.all()
