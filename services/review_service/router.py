from fastapi import APIRouter, Depends

from shared.storage.base import Storage
from shared.storage.dependencies import get_storage
from .schemas import ReviewCreate, ReviewResponse
from .service import ReviewService

router = APIRouter(tags=["reviews"])

def get_review_service(storage: Storage = Depends(get_storage)) -> ReviewService:
    return ReviewService(storage)


@router.get("/products/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(product_id: int, service: ReviewService = Depends(get_review_service)):
    return await service.list_reviews(product_id)


@router.post("/products/{product_id}/reviews", response_model=ReviewResponse)
async def create_review(
    product_id: int,
    review: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
):
    return await service.create_review(product_id, review)
