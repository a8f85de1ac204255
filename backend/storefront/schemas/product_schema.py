from datetime import datetime
from typing import List, Optional

from storefront.schemas.base import CamelModel, Money
from storefront.schemas.review_schema import ReviewOut


class ProductOut(CamelModel):
    id: str
    name: str
    description: str
    price: Money
    category: str
    image_url: str
    stock: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RatingSummary(CamelModel):
    average_rating: float
    num_reviews: int


class ProductDetailOut(ProductOut):
    reviews: List[ReviewOut] = []
    average_rating: float = 0.0
    num_reviews: int = 0


# Request bodies stay permissive; CatalogueService reports missing or bad
# values as InvalidInputError so the client gets a 400 with a readable message.
class ProductCreateIn(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    stock: Optional[int] = None


class ProductUpdateIn(ProductCreateIn):
    is_active: Optional[bool] = None
