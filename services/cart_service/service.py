from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import ConflictError, NotFoundError, ValidationError
from shared.money import line_total
from services.product_service.repository import ProductRepository
from .models import CartEntry
from .repository import CartRepository
from .schemas import CartItemAdd, CartItemResponse, CartItemUpdate, CartResponse

class CartService:
    @staticmethod
    async def get_cart(db: AsyncSession, user_id: int) -> CartResponse:
        rows = await CartRepository.list_with_products(db, user_id)
        items = [
            CartItemResponse(
                id=entry.id,
                product_id=product.id,
                quantity=entry.quantity,
                name=product.name,
                price=product.price,
                stock_quantity=product.stock_quantity,
                available=product.stock_quantity > 0,
            )
            for entry, product in rows
        ]
        subtotal = sum((line_total(item.price, item.quantity) for item in items), Decimal("0.00"))
        return CartResponse(cart=items, subtotal=subtotal, itemCount=len(items))

    @staticmethod
    async def add_item(db: AsyncSession, user_id: int, data: CartItemAdd) -> None:
        try:
            await CartService._add_or_merge(db, user_id, data)
        except ConflictError:
            # A concurrent add created the line first; merge into it instead
            await CartService._add_or_merge(db, user_id, data)

    @staticmethod
    async def _add_or_merge(db: AsyncSession, user_id: int, data: CartItemAdd) -> None:
        async with unit_of_work(db):
            product = await ProductRepository.get_product_by_id(db, data.product_id)
            if not product:
                raise NotFoundError("Product not found")

            if product.stock_quantity < data.quantity:
                raise ValidationError(f"Only {product.stock_quantity} items available in stock")

            # Repeated adds merge into one entry and are re-checked against stock
            existing = await CartRepository.get_entry(db, user_id, data.product_id)
            if existing:
                new_quantity = existing.quantity + data.quantity
                if product.stock_quantity < new_quantity:
                    raise ValidationError(
                        f"Cannot add more. Only {product.stock_quantity} items available"
                    )
                existing.quantity = new_quantity
            else:
                await CartRepository.add_entry(
                    db, CartEntry(user_id=user_id, product_id=data.product_id, quantity=data.quantity)
                )

    @staticmethod
    async def update_item(db: AsyncSession, user_id: int, cart_id: int, data: CartItemUpdate) -> None:
        async with unit_of_work(db):
            row = await CartRepository.get_owned_entry(db, user_id, cart_id)
            if not row:
                raise NotFoundError("Cart item not found")
            entry, product = row
            if product.stock_quantity < data.quantity:
                raise ValidationError(f"Only {product.stock_quantity} items available")
            entry.quantity = data.quantity

    @staticmethod
    async def remove_item(db: AsyncSession, user_id: int, cart_id: int) -> None:
        async with unit_of_work(db):
            if not await CartRepository.remove_entry(db, user_id, cart_id):
                raise NotFoundError("Cart item not found")

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int) -> None:
        async with unit_of_work(db):
            await CartRepository.clear_cart(db, user_id)
