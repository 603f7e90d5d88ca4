from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.schemas import MessageResponse
from shared.security.dependencies import get_current_user
from .schemas import OrderCreate, OrderDetailResponse, OrderListResponse, OrderPlacedResponse
from .service import OrderService

# Orders are always scoped to the authenticated account
router = APIRouter(prefix="/orders", tags=["Orders"])

@router.post("/create", response_model=OrderPlacedResponse)
async def create_order(
    payload: OrderCreate,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.create_order(db, user_id, payload)
    return OrderPlacedResponse(orderId=order.id)

@router.get("/my-orders", response_model=OrderListResponse)
async def my_orders(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await OrderService.list_orders(db, user_id)

@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(
    order_id: int,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.get_order(db, user_id, order_id)

@router.put("/cancel/{order_id}", response_model=MessageResponse)
async def cancel_order(
    order_id: int,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await OrderService.cancel_order(db, user_id, order_id)
    return MessageResponse(message="Order cancelled successfully")
