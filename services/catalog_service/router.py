from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.schemas import HealthResponse
from .schemas import CatalogProductCreate, CatalogProductResponse, CatalogProductUpdate
from .service import CatalogService

router = APIRouter(prefix="/products", tags=["Catalog"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check():
    return HealthResponse(service="catalog")


@router.post("/", response_model=CatalogProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(payload: CatalogProductCreate, db: AsyncSession = Depends(get_db)):
    return await CatalogService.create_product(db, payload)

@router.get("/", response_model=List[CatalogProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    return await CatalogService.list_products(db)

@router.get("/{product_id}", response_model=CatalogProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await CatalogService.get_product(db, product_id)

@router.put("/{product_id}", response_model=CatalogProductResponse)
async def update_product(product_id: int, payload: CatalogProductUpdate, db: AsyncSession = Depends(get_db)):
    return await CatalogService.update_product(db, product_id, payload)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    await CatalogService.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
