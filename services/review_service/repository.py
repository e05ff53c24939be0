from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Review

class ReviewRepository:
    @staticmethod
    async def get_reviews_for_product(db: AsyncSession, product_id: int):
        result = await db.execute(
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def create_review(db: AsyncSession, review: Review):
        db.add(review)
        await db.commit()
        await db.refresh(review)
        return review
