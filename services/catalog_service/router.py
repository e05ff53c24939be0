from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from shared.storage.base import Storage
from shared.storage.dependencies import get_storage
from .schemas import CategoryResponse, PriceBracket, ProductFilters, ProductResponse, ProductSort
from .service import CatalogService

router = APIRouter(tags=["catalog"])

def get_catalog_service(storage: Storage = Depends(get_storage)) -> CatalogService:
    return CatalogService(storage)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_categories()


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    search: Optional[str] = Query(default=None),
    featured: Optional[bool] = Query(default=None),
    price_ranges: List[PriceBracket] = Query(default=[], alias="priceRange"),
    sort: ProductSort = Query(default=ProductSort.BEST_MATCH),
    service: CatalogService = Depends(get_catalog_service),
):
    filters = ProductFilters(
        category_id=category_id,
        search=search,
        featured=featured,
        price_ranges=price_ranges,
        sort=sort,
    )
    return await service.list_products(filters)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    product = await service.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
