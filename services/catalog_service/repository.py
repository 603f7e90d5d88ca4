from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CatalogProduct

class CatalogRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: CatalogProduct):
        db.add(product)
        await db.flush()
        await db.refresh(product)
        return product

    @staticmethod
    async def get_all_products(db: AsyncSession) -> Sequence[CatalogProduct]:
        result = await db.execute(
            select(CatalogProduct).order_by(CatalogProduct.created_at.desc(), CatalogProduct.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[CatalogProduct]:
        result = await db.execute(select(CatalogProduct).where(CatalogProduct.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def update_product(db: AsyncSession, product: CatalogProduct):
        await db.flush()
        await db.refresh(product)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> bool:
        result = await db.execute(delete(CatalogProduct).where(CatalogProduct.id == product_id))
        return result.rowcount > 0
