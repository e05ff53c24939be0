from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from services.catalog_service.models import Product
from .models import CartItem
from .owner import OwnerKey

def _owned_by(owner: OwnerKey):
    if owner.user_id is not None:
        return CartItem.user_id == owner.user_id
    return CartItem.session_id == owner.session_id

class CartRepository:

    @staticmethod
    async def find_item(db: AsyncSession, owner: OwnerKey, product_id: int):
        result = await db.execute(
            select(CartItem)
            .where(_owned_by(owner))
            .where(CartItem.product_id == product_id)
        )
        return result.scalars().first()

    @staticmethod
    async def get_item(db: AsyncSession, item_id: int):
        result = await db.execute(select(CartItem).where(CartItem.id == item_id))
        return result.scalars().first()

    @staticmethod
    async def insert_item(db: AsyncSession, item: CartItem):
        db.add(item)
        await db.commit()
        await db.refresh(item)
        return item

    @staticmethod
    async def set_quantity(db: AsyncSession, item_id: int, quantity: int):
        item = await CartRepository.get_item(db, item_id)
        if not item:
            return None
        item.quantity = quantity
        await db.commit()
        await db.refresh(item)
        return item

    @staticmethod
    async def delete_item(db: AsyncSession, item_id: int) -> bool:
        result = await db.execute(delete(CartItem).where(CartItem.id == item_id))
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def clear_cart(db: AsyncSession, owner: OwnerKey) -> int:
        """Deletes every item belonging to this owner, and nobody else's."""
        result = await db.execute(delete(CartItem).where(_owned_by(owner)))
        await db.commit()
        return result.rowcount

    @staticmethod
    async def get_items_with_products(db: AsyncSession, owner: OwnerKey):
        # Inner join drops rows whose product has been deleted
        result = await db.execute(
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(_owned_by(owner))
            .order_by(CartItem.id)
        )
        return [(item, product) for item, product in result.all()]
