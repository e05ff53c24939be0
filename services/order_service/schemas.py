from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from services.catalog_service.schemas import ProductResponse
from shared.schemas import CamelModel

class PaymentMethod(str, Enum):
    COD = "cod"
    ONLINE = "online"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"

class DeliveryAddress(CamelModel):
    full_name: str
    phone: str
    address: str
    city: str
    pincode: str
    landmark: Optional[str] = None

    @field_validator("full_name", "phone", "address", "pincode")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

class OrderCreate(CamelModel):
    order_number: str = Field(min_length=1)
    customer_id: Optional[int] = None
    subtotal: Decimal = Field(ge=0)
    delivery_charge: Decimal = Field(default=Decimal("0"), ge=0)
    total: Decimal = Field(ge=0)
    payment_method: PaymentMethod = PaymentMethod.COD
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: str = "placed"
    delivery_address: DeliveryAddress
    delivery_instructions: Optional[str] = None
    estimated_delivery_time: Optional[datetime] = None

class OrderItemCreate(CamelModel):
    product_id: int
    seller_id: int = 1
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    total_price: Decimal = Field(ge=0)

class OrderRequest(CamelModel):
    order: OrderCreate
    items: List[OrderItemCreate] = Field(min_length=1)

class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    seller_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal

class OrderItemDetail(OrderItemResponse):
    # None once the product has been removed from the catalog
    product: Optional[ProductResponse] = None

class OrderResponse(CamelModel):
    id: int
    order_number: str
    customer_id: Optional[int] = None
    subtotal: Decimal
    delivery_charge: Decimal
    total: Decimal
    payment_method: str
    payment_status: str
    status: str
    delivery_address: DeliveryAddress
    delivery_instructions: Optional[str] = None
    estimated_delivery_time: Optional[datetime] = None
    created_at: Optional[datetime] = None

class OrderDetailResponse(OrderResponse):
    items: List[OrderItemDetail] = Field(default_factory=list)
