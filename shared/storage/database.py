from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional, Tuple

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from services.cart_service.models import CartItem
from services.cart_service.owner import OwnerKey
from services.cart_service.repository import CartRepository
from services.catalog_service.models import Category, Product
from services.catalog_service.repository import CatalogRepository
from services.order_service.models import Order, OrderItem
from services.order_service.repository import OrderRepository
from services.review_service.models import Review
from services.review_service.repository import ReviewRepository
from shared.config.database import Base, build_engine, build_session_factory
from shared.errors import StorageError

from .base import Storage

logger = structlog.get_logger(__name__)


class DatabaseStorage(Storage):
    """Storage over an async SQLAlchemy engine. Every call runs in its own session."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = build_session_factory(engine)

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> "DatabaseStorage":
        return cls(build_engine(url, **engine_kwargs))

    async def init(self):
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("storage_init_failed", error=str(e))
            raise StorageError("Could not initialise the database") from e
        logger.info("storage_ready", tables=sorted(Base.metadata.tables.keys()))

    async def close(self):
        await self.engine.dispose()

    @asynccontextmanager
    async def _session(self, operation: str):
        async with self._session_factory() as db:
            try:
                yield db
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("storage_operation_failed", operation=operation, error=str(e))
                raise StorageError(f"{operation} failed") from e

    # --- Categories ---

    async def list_categories(self, active_only: bool = True) -> List[Category]:
        async with self._session("list_categories") as db:
            return list(await CatalogRepository.get_categories(db, active_only))

    async def get_category(self, category_id: int) -> Optional[Category]:
        async with self._session("get_category") as db:
            return await CatalogRepository.get_category_by_id(db, category_id)

    async def create_category(self, category: Category) -> Category:
        async with self._session("create_category") as db:
            return await CatalogRepository.create_category(db, category)

    # --- Products ---

    async def list_products(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        active_only: bool = True,
    ) -> List[Product]:
        async with self._session("list_products") as db:
            return list(await CatalogRepository.get_products(db, category_id, search, featured, active_only))

    async def get_product(self, product_id: int) -> Optional[Product]:
        async with self._session("get_product") as db:
            return await CatalogRepository.get_product_by_id(db, product_id)

    async def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        async with self._session("get_products_by_ids") as db:
            products = await CatalogRepository.get_products_by_ids(db, sorted(set(product_ids)))
            return {p.id: p for p in products}

    async def create_product(self, product: Product) -> Product:
        async with self._session("create_product") as db:
            return await CatalogRepository.create_product(db, product)

    async def update_product(self, product_id: int, values: dict) -> Optional[Product]:
        async with self._session("update_product") as db:
            return await CatalogRepository.update_product(db, product_id, values)

    # --- Cart ---

    async def find_cart_item(self, owner: OwnerKey, product_id: int) -> Optional[CartItem]:
        async with self._session("find_cart_item") as db:
            return await CartRepository.find_item(db, owner, product_id)

    async def get_cart_item(self, item_id: int) -> Optional[CartItem]:
        async with self._session("get_cart_item") as db:
            return await CartRepository.get_item(db, item_id)

    async def insert_cart_item(self, item: CartItem) -> CartItem:
        async with self._session("insert_cart_item") as db:
            return await CartRepository.insert_item(db, item)

    async def set_cart_item_quantity(self, item_id: int, quantity: int) -> Optional[CartItem]:
        async with self._session("set_cart_item_quantity") as db:
            return await CartRepository.set_quantity(db, item_id, quantity)

    async def delete_cart_item(self, item_id: int) -> bool:
        async with self._session("delete_cart_item") as db:
            return await CartRepository.delete_item(db, item_id)

    async def clear_cart(self, owner: OwnerKey) -> int:
        async with self._session("clear_cart") as db:
            return await CartRepository.clear_cart(db, owner)

    async def list_cart_items(self, owner: OwnerKey) -> List[Tuple[CartItem, Product]]:
        async with self._session("list_cart_items") as db:
            return await CartRepository.get_items_with_products(db, owner)

    # --- Orders ---

    async def create_order(self, order: Order, items: List[OrderItem]) -> Order:
        async with self._session("create_order") as db:
            return await OrderRepository.create_order(db, order, items)

    async def get_order(self, order_id: int) -> Optional[Order]:
        async with self._session("get_order") as db:
            return await OrderRepository.get_order(db, order_id)

    async def list_orders(self, customer_id: Optional[int] = None) -> List[Order]:
        async with self._session("list_orders") as db:
            return list(await OrderRepository.get_orders(db, customer_id))

    async def order_number_exists(self, order_number: str) -> bool:
        async with self._session("order_number_exists") as db:
            return await OrderRepository.order_number_exists(db, order_number)

    # --- Reviews ---

    async def list_reviews(self, product_id: int) -> List[Review]:
        async with self._session("list_reviews") as db:
            return list(await ReviewRepository.get_reviews_for_product(db, product_id))

    async def create_review(self, review: Review) -> Review:
        async with self._session("create_review") as db:
            return await ReviewRepository.create_review(db, review)
