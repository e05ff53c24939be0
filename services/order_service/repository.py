from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from .models import Order, OrderItem

class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order, items: list[OrderItem]):
        # Header and items go out in a single flush inside one transaction
        order.items = list(items)
        db.add(order)
        await db.commit()
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int):
        result = await db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
        )
        return result.scalars().first()

    @staticmethod
    async def get_orders(db: AsyncSession, customer_id: int | None = None):
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if customer_id is not None:
            stmt = stmt.where(Order.customer_id == customer_id)
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def order_number_exists(db: AsyncSession, order_number: str) -> bool:
        result = await db.execute(select(Order.id).where(Order.order_number == order_number))
        return result.first() is not None
