from typing import Optional, Sequence

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Product


class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.flush()
        await db.refresh(product)
        return product

    @staticmethod
    async def search_products(
        db: AsyncSession, search: str, limit: int, offset: int
    ) -> tuple[Sequence[Product], int]:
        query = select(Product)
        count_query = select(func.count()).select_from(Product)
        if search:
            pattern = f"%{search}%"
            criteria = or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
            query = query.where(criteria)
            count_query = count_query.where(criteria)

        query = query.order_by(Product.created_at.desc(), Product.id.desc()).limit(limit).offset(offset)
        products = (await db.execute(query)).scalars().all()
        total = (await db.execute(count_query)).scalar_one()
        return products, total

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[Product]:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def update_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.flush()
        await db.refresh(product)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> bool:
        result = await db.execute(delete(Product).where(Product.id == product_id))
        return result.rowcount > 0

    @staticmethod
    async def reduce_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        """Guarded decrement: touches the row only if enough stock remains."""
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount == 1

    @staticmethod
    async def restore_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_quantity=Product.stock_quantity + quantity)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount == 1
