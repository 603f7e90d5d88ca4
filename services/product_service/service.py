import math

from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import ConflictError, NotFoundError
from .models import Product
from .repository import ProductRepository
from .schemas import Pagination, ProductCreate, ProductPage, ProductResponse, ProductUpdate

class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            stock_quantity=data.stock_quantity
        )
        async with unit_of_work(db):
            return await ProductRepository.create_product(db, product)

    @staticmethod
    async def list_products(db: AsyncSession, page: int = 1, limit: int = 20, search: str = "") -> ProductPage:
        products, total = await ProductRepository.search_products(
            db, search.strip(), limit=limit, offset=(page - 1) * limit
        )
        total_pages = math.ceil(total / limit)
        return ProductPage(
            products=[ProductResponse.model_validate(p) for p in products],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                totalPages=total_pages,
                hasMore=page < total_pages,
            ),
        )

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int) -> Product:
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> Product:
        async with unit_of_work(db):
            product = await ProductRepository.get_product_by_id(db, product_id)
            if not product:
                raise NotFoundError("Product not found")
            for field, value in data.model_dump(exclude_unset=True).items():
                if value is not None or field == "description":
                    setattr(product, field, value)
            return await ProductRepository.update_product(db, product)

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> None:
        try:
            async with unit_of_work(db):
                if not await ProductRepository.delete_product(db, product_id):
                    raise NotFoundError("Product not found")
        except ConflictError as exc:
            raise ConflictError("Product is referenced by existing orders") from exc
