from datetime import datetime
from typing import Optional

from pydantic import Field

from services.catalog_service.schemas import ProductResponse
from shared.schemas import CamelModel

class CartItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)
    user_id: Optional[int] = None
    session_id: Optional[str] = None

class CartItemUpdate(CamelModel):
    # Zero or negative removes the item
    quantity: int

class CartItemResponse(CamelModel):
    id: int
    product_id: int
    quantity: int
    user_id: Optional[int] = None
    session_id: Optional[str] = None
    created_at: Optional[datetime] = None

class CartClearedResponse(CamelModel):
    message: str
    success: bool
    removed: int

class CartLineResponse(CartItemResponse):
    product: ProductResponse

    @classmethod
    def from_line(cls, item, product) -> "CartLineResponse":
        data = CartItemResponse.model_validate(item).model_dump()
        return cls(**data, product=ProductResponse.model_validate(product))
