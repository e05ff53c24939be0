"""
The storage boundary every service talks to.

`DatabaseStorage` is the production implementation over async SQLAlchemy;
`InMemoryStorage` substitutes for it in tests. Services receive one of them at
construction and never reach for a global connection.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from services.cart_service.models import CartItem
from services.cart_service.owner import OwnerKey
from services.catalog_service.models import Category, Product
from services.order_service.models import Order, OrderItem
from services.review_service.models import Review


class Storage(ABC):

    async def init(self):
        """Prepare the backing store (create tables, open pools)."""

    async def close(self):
        """Release any resources held by the store."""

    # --- Categories ---

    @abstractmethod
    async def list_categories(self, active_only: bool = True) -> List[Category]: ...

    @abstractmethod
    async def get_category(self, category_id: int) -> Optional[Category]: ...

    @abstractmethod
    async def create_category(self, category: Category) -> Category: ...

    # --- Products ---

    @abstractmethod
    async def list_products(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        active_only: bool = True,
    ) -> List[Product]:
        """Store-side filters, AND-combined. `search` matches name, localized name or description."""

    @abstractmethod
    async def get_product(self, product_id: int) -> Optional[Product]: ...

    @abstractmethod
    async def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]: ...

    @abstractmethod
    async def create_product(self, product: Product) -> Product: ...

    @abstractmethod
    async def update_product(self, product_id: int, values: dict) -> Optional[Product]: ...

    # --- Cart ---

    @abstractmethod
    async def find_cart_item(self, owner: OwnerKey, product_id: int) -> Optional[CartItem]: ...

    @abstractmethod
    async def get_cart_item(self, item_id: int) -> Optional[CartItem]: ...

    @abstractmethod
    async def insert_cart_item(self, item: CartItem) -> CartItem: ...

    @abstractmethod
    async def set_cart_item_quantity(self, item_id: int, quantity: int) -> Optional[CartItem]: ...

    @abstractmethod
    async def delete_cart_item(self, item_id: int) -> bool: ...

    @abstractmethod
    async def clear_cart(self, owner: OwnerKey) -> int:
        """Deletes the owner's rows only. Returns how many were removed."""

    @abstractmethod
    async def list_cart_items(self, owner: OwnerKey) -> List[Tuple[CartItem, Product]]:
        """Cart rows paired with their product; rows with a dangling product are left out."""

    # --- Orders ---

    @abstractmethod
    async def create_order(self, order: Order, items: List[OrderItem]) -> Order:
        """Persists the header and all items in one transaction."""

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[Order]:
        """Returns the order with `items` populated."""

    @abstractmethod
    async def list_orders(self, customer_id: Optional[int] = None) -> List[Order]: ...

    @abstractmethod
    async def order_number_exists(self, order_number: str) -> bool: ...

    # --- Reviews ---

    @abstractmethod
    async def list_reviews(self, product_id: int) -> List[Review]: ...

    @abstractmethod
    async def create_review(self, review: Review) -> Review: ...
