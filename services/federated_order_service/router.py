from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.schemas import HealthResponse
from .enrichment import Enriched, EnrichmentResult
from .schemas import FederatedOrderCreate, FederatedOrderResponse, FederatedOrderUpdate
from .service import FederatedOrderService

router = APIRouter(prefix="/orders", tags=["Orders"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


def get_order_service(request: Request) -> FederatedOrderService:
    return request.app.state.order_service


def to_response(result: EnrichmentResult) -> FederatedOrderResponse:
    response = FederatedOrderResponse.model_validate(result.order)
    if isinstance(result, Enriched):
        response.user = result.user
        response.product = result.product
        response.enriched = True
    return response


@public_router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check():
    return HealthResponse(service="order")


@router.post("", response_model=FederatedOrderResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=FederatedOrderResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_order(
    payload: FederatedOrderCreate,
    db: AsyncSession = Depends(get_db),
    service: FederatedOrderService = Depends(get_order_service),
):
    return to_response(await service.create_order(db, payload))


@router.get("", response_model=List[FederatedOrderResponse])
@router.get("/", response_model=List[FederatedOrderResponse], include_in_schema=False)
async def list_orders(
    db: AsyncSession = Depends(get_db),
    service: FederatedOrderService = Depends(get_order_service),
):
    return [to_response(result) for result in await service.list_orders(db)]


@router.get("/{order_id}", response_model=FederatedOrderResponse)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    service: FederatedOrderService = Depends(get_order_service),
):
    return to_response(await service.get_order(db, order_id))


@router.put("/{order_id}", response_model=FederatedOrderResponse)
async def update_order(
    order_id: int,
    payload: FederatedOrderUpdate,
    db: AsyncSession = Depends(get_db),
    service: FederatedOrderService = Depends(get_order_service),
):
    return to_response(await service.update_order(db, order_id, payload))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    service: FederatedOrderService = Depends(get_order_service),
):
    await service.delete_order(db, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
