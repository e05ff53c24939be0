from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field

from shared.schemas import CamelModel

class PriceBracket(str, Enum):
    UNDER_25 = "under-25"
    FROM_25_TO_50 = "25-50"
    FROM_50_TO_100 = "50-100"
    OVER_100 = "over-100"

class ProductSort(str, Enum):
    BEST_MATCH = "best-match"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    NEWEST = "newest"

class ProductFilters(CamelModel):
    category_id: Optional[int] = None
    search: Optional[str] = None
    featured: Optional[bool] = None
    active_only: bool = True
    price_ranges: List[PriceBracket] = Field(default_factory=list)
    sort: ProductSort = ProductSort.BEST_MATCH

class CategoryCreate(CamelModel):
    name: str
    slug: str
    icon: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True

class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    icon: Optional[str] = None
    sort_order: int = 0
    is_active: bool

class ProductCreate(CamelModel):
    name: str
    name_hindi: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Field(ge=0, decimal_places=2)
    original_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    unit: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    category_id: Optional[int] = None
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5)
    review_count: int = 0
    is_active: bool = True
    is_featured: bool = False

class ProductResponse(CamelModel):
    id: int
    name: str
    name_hindi: Optional[str] = None
    description: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    brand: Optional[str] = None
    unit: Optional[str] = None
    stock: int
    category_id: Optional[int] = None
    rating: Optional[Decimal] = None
    review_count: int = 0
    is_active: bool
    is_featured: bool = False
    created_at: Optional[datetime] = None
