from datetime import datetime
from typing import Any, List, Optional

from .inventory_schemas import CamelModel


class ReviewCreate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    rating: Any = None
    comment: Optional[str] = None


class Review(CamelModel):
    id: str
    product_id: str
    name: str
    email: Optional[str] = None
    rating: int
    comment: str
    created_at: datetime


class RatingSummary(CamelModel):
    average: float = 0
    count: int = 0


class ReviewListOut(CamelModel):
    reviews: List[Review]
    summary: RatingSummary


class ReviewCreatedOut(CamelModel):
    review: Review
    summary: RatingSummary
