from decimal import Decimal
from typing import List

import structlog

from shared.errors import InvalidRequestError
from shared.storage.base import Storage
from .models import Category, Product
from .schemas import CategoryCreate, PriceBracket, ProductCreate, ProductFilters, ProductSort

logger = structlog.get_logger(__name__)

# Half-open [low, high) ranges; None means unbounded
PRICE_BRACKETS = {
    PriceBracket.UNDER_25: (None, Decimal("25")),
    PriceBracket.FROM_25_TO_50: (Decimal("25"), Decimal("50")),
    PriceBracket.FROM_50_TO_100: (Decimal("50"), Decimal("100")),
    PriceBracket.OVER_100: (Decimal("100"), None),
}


def in_bracket(price: Decimal, bracket: PriceBracket) -> bool:
    low, high = PRICE_BRACKETS[bracket]
    if low is not None and price < low:
        return False
    if high is not None and price >= high:
        return False
    return True


def filter_by_price(products: List[Product], brackets: List[PriceBracket]) -> List[Product]:
    """Keeps products falling in any of the selected brackets. No brackets keeps everything."""
    if not brackets:
        return products
    return [p for p in products if any(in_bracket(Decimal(p.price), b) for b in brackets)]


def sort_products(products: List[Product], sort: ProductSort) -> List[Product]:
    if sort == ProductSort.PRICE_LOW:
        return sorted(products, key=lambda p: Decimal(p.price))
    if sort == ProductSort.PRICE_HIGH:
        return sorted(products, key=lambda p: Decimal(p.price), reverse=True)
    if sort == ProductSort.RATING:
        return sorted(products, key=lambda p: Decimal(p.rating or 0), reverse=True)
    if sort == ProductSort.NEWEST:
        return sorted(products, key=lambda p: (p.created_at is not None, p.created_at, p.id), reverse=True)
    return products


class CatalogService:
    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_categories(self):
        return await self.storage.list_categories(active_only=True)

    async def create_category(self, data: CategoryCreate):
        category = Category(**data.model_dump())
        return await self.storage.create_category(category)

    async def list_products(self, filters: ProductFilters):
        products = await self.storage.list_products(
            category_id=filters.category_id,
            search=filters.search.strip() if filters.search else None,
            featured=filters.featured,
            active_only=filters.active_only,
        )
        # Price brackets and ordering run on the fetched result set
        products = filter_by_price(products, filters.price_ranges)
        return sort_products(products, filters.sort)

    async def get_product(self, product_id: int):
        return await self.storage.get_product(product_id)

    async def create_product(self, data: ProductCreate):
        if data.category_id is not None and await self.storage.get_category(data.category_id) is None:
            raise InvalidRequestError(f"Category {data.category_id} not found")
        product = Product(**data.model_dump())
        product = await self.storage.create_product(product)
        logger.info("product_created", product_id=product.id, name=product.name)
        return product
