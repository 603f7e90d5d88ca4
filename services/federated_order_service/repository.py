from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import FederatedOrder

class FederatedOrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: FederatedOrder):
        db.add(order)
        await db.flush()
        await db.refresh(order)
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int, for_update: bool = False) -> Optional[FederatedOrder]:
        query = select(FederatedOrder).where(FederatedOrder.id == order_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def list_orders(db: AsyncSession) -> Sequence[FederatedOrder]:
        result = await db.execute(
            select(FederatedOrder).order_by(FederatedOrder.created_at.desc(), FederatedOrder.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: int) -> bool:
        result = await db.execute(delete(FederatedOrder).where(FederatedOrder.id == order_id))
        return result.rowcount > 0
