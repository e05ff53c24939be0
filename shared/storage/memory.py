from decimal import Decimal
from itertools import count
from typing import Dict, Iterable, List, Optional, Tuple

from services.cart_service.models import CartItem
from services.cart_service.owner import OwnerKey
from services.catalog_service.models import Category, Product
from services.order_service.models import Order, OrderItem
from services.review_service.models import Review
from shared.config.database import utcnow

from .base import Storage


def _owned_by(item: CartItem, owner: OwnerKey) -> bool:
    if owner.user_id is not None:
        return item.user_id == owner.user_id
    return item.session_id == owner.session_id


def _matches(text: Optional[str], needle: str) -> bool:
    return bool(text) and needle in text.lower()


class InMemoryStorage(Storage):
    """
    Dict-backed Storage holding transient ORM instances.
    Column defaults are applied by hand since nothing is ever flushed.
    """

    def __init__(self):
        self.categories: Dict[int, Category] = {}
        self.products: Dict[int, Product] = {}
        self.cart_items: Dict[int, CartItem] = {}
        self.orders: Dict[int, Order] = {}
        self.reviews: Dict[int, Review] = {}
        self._ids = {name: count(1) for name in ("category", "product", "cart", "order", "order_item", "review")}

    def _next_id(self, kind: str) -> int:
        return next(self._ids[kind])

    # --- Categories ---

    async def list_categories(self, active_only: bool = True) -> List[Category]:
        categories = [c for c in self.categories.values() if c.is_active or not active_only]
        return sorted(categories, key=lambda c: (c.sort_order or 0, c.id))

    async def get_category(self, category_id: int) -> Optional[Category]:
        return self.categories.get(category_id)

    async def create_category(self, category: Category) -> Category:
        category.id = self._next_id("category")
        if category.sort_order is None:
            category.sort_order = 0
        if category.is_active is None:
            category.is_active = True
        self.categories[category.id] = category
        return category

    # --- Products ---

    async def list_products(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        active_only: bool = True,
    ) -> List[Product]:
        products = list(self.products.values())
        if active_only:
            products = [p for p in products if p.is_active]
        if category_id is not None:
            products = [p for p in products if p.category_id == category_id]
        if featured is not None:
            products = [p for p in products if bool(p.is_featured) == featured]
        if search:
            needle = search.lower()
            products = [
                p for p in products
                if _matches(p.name, needle) or _matches(p.name_hindi, needle) or _matches(p.description, needle)
            ]
        return sorted(products, key=lambda p: p.id)

    async def get_product(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    async def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        return {pid: self.products[pid] for pid in set(product_ids) if pid in self.products}

    async def create_product(self, product: Product) -> Product:
        product.id = self._next_id("product")
        defaults = {
            "images": [],
            "stock": 0,
            "review_count": 0,
            "is_active": True,
            "is_featured": False,
            "created_at": utcnow(),
        }
        for field, value in defaults.items():
            if getattr(product, field) is None:
                setattr(product, field, value)
        self.products[product.id] = product
        return product

    async def update_product(self, product_id: int, values: dict) -> Optional[Product]:
        product = self.products.get(product_id)
        if not product:
            return None
        for field, value in values.items():
            setattr(product, field, value)
        return product

    # --- Cart ---

    async def find_cart_item(self, owner: OwnerKey, product_id: int) -> Optional[CartItem]:
        for item in self.cart_items.values():
            if item.product_id == product_id and _owned_by(item, owner):
                return item
        return None

    async def get_cart_item(self, item_id: int) -> Optional[CartItem]:
        return self.cart_items.get(item_id)

    async def insert_cart_item(self, item: CartItem) -> CartItem:
        item.id = self._next_id("cart")
        if item.quantity is None:
            item.quantity = 1
        item.created_at = utcnow()
        self.cart_items[item.id] = item
        return item

    async def set_cart_item_quantity(self, item_id: int, quantity: int) -> Optional[CartItem]:
        item = self.cart_items.get(item_id)
        if not item:
            return None
        item.quantity = quantity
        return item

    async def delete_cart_item(self, item_id: int) -> bool:
        return self.cart_items.pop(item_id, None) is not None

    async def clear_cart(self, owner: OwnerKey) -> int:
        doomed = [item_id for item_id, item in self.cart_items.items() if _owned_by(item, owner)]
        for item_id in doomed:
            del self.cart_items[item_id]
        return len(doomed)

    async def list_cart_items(self, owner: OwnerKey) -> List[Tuple[CartItem, Product]]:
        lines = []
        for item in sorted(self.cart_items.values(), key=lambda i: i.id):
            product = self.products.get(item.product_id)
            if _owned_by(item, owner) and product is not None:
                lines.append((item, product))
        return lines

    # --- Orders ---

    async def create_order(self, order: Order, items: List[OrderItem]) -> Order:
        # Nothing below can fail halfway, so the order and its items land together
        order.id = self._next_id("order")
        order.created_at = utcnow()
        if order.delivery_charge is None:
            order.delivery_charge = Decimal("0")
        for item in items:
            item.id = self._next_id("order_item")
            item.order_id = order.id
        order.items = list(items)
        self.orders[order.id] = order
        return order

    async def get_order(self, order_id: int) -> Optional[Order]:
        return self.orders.get(order_id)

    async def list_orders(self, customer_id: Optional[int] = None) -> List[Order]:
        orders = [o for o in self.orders.values() if customer_id is None or o.customer_id == customer_id]
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    async def order_number_exists(self, order_number: str) -> bool:
        return any(o.order_number == order_number for o in self.orders.values())

    # --- Reviews ---

    async def list_reviews(self, product_id: int) -> List[Review]:
        reviews = [r for r in self.reviews.values() if r.product_id == product_id]
        return sorted(reviews, key=lambda r: (r.created_at, r.id), reverse=True)

    async def create_review(self, review: Review) -> Review:
        review.id = self._next_id("review")
        review.created_at = utcnow()
        self.reviews[review.id] = review
        return review
