from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import NotFoundError
from .models import CatalogProduct
from .repository import CatalogRepository
from .schemas import CatalogProductCreate, CatalogProductUpdate

class CatalogService:

    @staticmethod
    async def create_product(db: AsyncSession, data: CatalogProductCreate):
        product = CatalogProduct(
            name=data.name,
            price=data.price,
            description=data.description
        )
        async with unit_of_work(db):
            return await CatalogRepository.create_product(db, product)

    @staticmethod
    async def list_products(db: AsyncSession):
        return await CatalogRepository.get_all_products(db)

    @staticmethod
    async def get_product(db: AsyncSession, product_id: int) -> CatalogProduct:
        product = await CatalogRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: CatalogProductUpdate):
        async with unit_of_work(db):
            product = await CatalogRepository.get_product_by_id(db, product_id)
            if not product:
                raise NotFoundError("Product not found")
            changes = data.model_dump(exclude_unset=True)
            if changes.get("name") is not None:
                product.name = changes["name"]
            if changes.get("price") is not None:
                product.price = changes["price"]
            if "description" in changes:
                product.description = changes["description"]
            return await CatalogRepository.update_product(db, product)

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> None:
        async with unit_of_work(db):
            if not await CatalogRepository.delete_product(db, product_id):
                raise NotFoundError("Product not found")
