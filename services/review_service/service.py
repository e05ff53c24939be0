import structlog

from shared.errors import NotFoundError
from shared.storage.base import Storage
from .models import Review
from .schemas import ReviewCreate

logger = structlog.get_logger(__name__)

class ReviewService:
    def __init__(self, storage: Storage):
        self.storage = storage

    async def list_reviews(self, product_id: int):
        return await self.storage.list_reviews(product_id)

    async def create_review(self, product_id: int, data: ReviewCreate):
        if not await self.storage.get_product(product_id):
            raise NotFoundError("Product not found")

        # Product.rating / review_count are aggregates maintained elsewhere
        review = Review(
            product_id=product_id,
            customer_id=data.customer_id,
            rating=data.rating,
            comment=data.comment.strip() if data.comment else None,
        )
        review = await self.storage.create_review(review)
        logger.info("review_created", review_id=review.id, product_id=product_id, rating=review.rating)
        return review
