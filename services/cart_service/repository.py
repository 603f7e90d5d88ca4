from typing import Optional, Sequence

from sqlalchemy import Row, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.models import Product
from .models import CartEntry

class CartRepository:
    @staticmethod
    async def list_with_products(db: AsyncSession, user_id: int) -> Sequence[Row]:
        result = await db.execute(
            select(CartEntry, Product)
            .join(Product, CartEntry.product_id == Product.id)
            .where(CartEntry.user_id == user_id)
            .order_by(CartEntry.id)
        )
        return result.all()

    @staticmethod
    async def lock_with_products(db: AsyncSession, user_id: int) -> Sequence[Row]:
        """Cart rows joined with their products, product rows locked.

        Ordered by product id so concurrent placements lock in the same order.
        """
        result = await db.execute(
            select(CartEntry, Product)
            .join(Product, CartEntry.product_id == Product.id)
            .where(CartEntry.user_id == user_id)
            .order_by(Product.id)
            .with_for_update(of=Product)
        )
        return result.all()

    @staticmethod
    async def get_entry(db: AsyncSession, user_id: int, product_id: int) -> Optional[CartEntry]:
        result = await db.execute(
            select(CartEntry)
            .where(CartEntry.user_id == user_id)
            .where(CartEntry.product_id == product_id)
            .with_for_update()
        )
        return result.scalars().first()

    @staticmethod
    async def get_owned_entry(db: AsyncSession, user_id: int, cart_id: int) -> Optional[Row]:
        result = await db.execute(
            select(CartEntry, Product)
            .join(Product, CartEntry.product_id == Product.id)
            .where(CartEntry.id == cart_id, CartEntry.user_id == user_id)
        )
        return result.first()

    @staticmethod
    async def add_entry(db: AsyncSession, entry: CartEntry) -> CartEntry:
        db.add(entry)
        await db.flush()
        return entry

    @staticmethod
    async def remove_entry(db: AsyncSession, user_id: int, cart_id: int) -> bool:
        stmt = delete(CartEntry).where(CartEntry.id == cart_id, CartEntry.user_id == user_id)
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int) -> int:
        """Deletes all entries for the account; caller owns the commit."""
        result = await db.execute(delete(CartEntry).where(CartEntry.user_id == user_id))
        return result.rowcount
