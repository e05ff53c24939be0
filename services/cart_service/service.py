import structlog

from shared.errors import NotFoundError
from shared.observability import storefront_cart_mutations_total
from shared.storage.base import Storage
from .models import CartItem
from .owner import OwnerKey
from .schemas import CartLineResponse

logger = structlog.get_logger(__name__)

class CartService:
    def __init__(self, storage: Storage):
        self.storage = storage

    async def add_to_cart(self, owner: OwnerKey, product_id: int, quantity: int = 1):
        """Adds a product, or bumps the quantity of the row already holding it."""
        if quantity is None:
            quantity = 1
        product = await self.storage.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")

        # Read-then-write: concurrent adds for the same owner/product can race
        existing = await self.storage.find_cart_item(owner, product_id)
        if existing:
            item = await self.storage.set_cart_item_quantity(existing.id, existing.quantity + quantity)
        else:
            item = await self.storage.insert_cart_item(
                CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    user_id=owner.user_id,
                    session_id=owner.session_id,
                )
            )

        storefront_cart_mutations_total.labels(action="add").inc()
        logger.info("cart_item_added", item_id=item.id, product_id=product_id, quantity=item.quantity, **owner.as_params())
        return item

    async def update_quantity(self, item_id: int, quantity: int):
        """Replaces the quantity. Returns None when quantity <= 0 removed the item."""
        if quantity <= 0:
            await self.remove_item(item_id)
            return None

        item = await self.storage.set_cart_item_quantity(item_id, quantity)
        if not item:
            raise NotFoundError("Cart item not found")
        storefront_cart_mutations_total.labels(action="update").inc()
        return item

    async def remove_item(self, item_id: int):
        removed = await self.storage.delete_cart_item(item_id)
        if not removed:
            raise NotFoundError("Cart item not found")
        storefront_cart_mutations_total.labels(action="remove").inc()
        logger.info("cart_item_removed", item_id=item_id)

    async def clear_cart(self, owner: OwnerKey) -> int:
        removed = await self.storage.clear_cart(owner)
        storefront_cart_mutations_total.labels(action="clear").inc()
        logger.info("cart_cleared", removed=removed, **owner.as_params())
        return removed

    async def list_cart(self, owner: OwnerKey):
        lines = await self.storage.list_cart_items(owner)
        return [CartLineResponse.from_line(item, product) for item, product in lines]
