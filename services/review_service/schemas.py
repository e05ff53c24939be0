from datetime import datetime
from typing import Optional

from pydantic import Field

from shared.schemas import CamelModel

class ReviewCreate(CamelModel):
    customer_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None

class ReviewResponse(CamelModel):
    id: int
    product_id: int
    customer_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
