from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import verify_internal_api_key
from .schemas import ProductCreate, ProductPage, ProductResponse, ProductUpdate
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])
# Catalog administration is restricted to internal callers
admin_router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(verify_internal_api_key)],
)


@router.get("/", response_model=ProductPage)
async def list_products(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    search: str = Query(default="", max_length=100),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService.list_products(db, page=page, limit=limit, search=search)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db)
):
    return await ProductService.get_product_by_id(db, product_id)


@admin_router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    db: AsyncSession = Depends(get_db)
):
    return await ProductService.create_product(db, product)

@admin_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db)
):
    return await ProductService.update_product(db, product_id, payload)

@admin_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    await ProductService.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
