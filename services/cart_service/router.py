from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.schemas import MessageResponse
from shared.security.dependencies import get_current_user

from .schemas import CartItemAdd, CartItemUpdate, CartResponse
from .service import CartService

# Every cart route acts on the caller's own cart
router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("/", response_model=CartResponse)
async def get_cart(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await CartService.get_cart(db, user_id)


@router.post("/add", response_model=MessageResponse)
async def add_item(
    item: CartItemAdd,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService.add_item(db, user_id, item)
    return MessageResponse(message="Item added to cart")


@router.put("/update/{cart_id}", response_model=MessageResponse)
async def update_item(
    cart_id: int,
    item: CartItemUpdate,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService.update_item(db, user_id, cart_id, item)
    return MessageResponse(message="Cart updated")


@router.delete("/remove/{cart_id}", response_model=MessageResponse)
async def remove_item(
    cart_id: int,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService.remove_item(db, user_id, cart_id)
    return MessageResponse(message="Item removed from cart")


@router.delete("/clear", response_model=MessageResponse)
async def clear_cart(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    await CartService.clear_cart(db, user_id)
    return MessageResponse(message="Cart cleared")
