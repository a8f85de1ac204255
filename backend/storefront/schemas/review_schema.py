from datetime import datetime
from typing import Optional

from storefront.schemas.base import CamelModel


class ReviewUserOut(CamelModel):
    id: str
    name: str


class ReviewOut(CamelModel):
    id: str
    user: ReviewUserOut
    rating: int
    comment: str
    created_at: datetime


class ReviewIn(CamelModel):
    rating: Optional[int] = None
    comment: Optional[str] = None
