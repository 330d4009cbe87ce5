import logging
import random
import time
from datetime import datetime, timezone

from fastapi import status

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ..schemas.review_schemas import (
    ReviewCreate, ReviewCreatedOut, ReviewListOut, Review)
from ..stores.review_store import ReviewStore

logger = logging.getLogger(__name__)


def create_review_id() -> str:
    return f"REV-{int(time.time() * 1000)}-{random.randint(1000, 9999)}"


def parse_rating(value) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer() or not 1 <= number <= 5:
        return None
    return int(number)


def get_product_reviews(reviews: ReviewStore, product_id: str, limit: int = 50) -> ReviewListOut:
    return ReviewListOut(
        reviews=reviews.list_for_product(product_id, limit=limit),
        summary=reviews.rating_summary(product_id),
    )


def create_product_review(reviews: ReviewStore, product_id: str, payload: ReviewCreate) -> ReviewCreatedOut:
    name = (payload.name or "").strip()
    comment = (payload.comment or "").strip()
    if not name or not comment:
        return error_response(
            message="Name and comment are required.",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=status.HTTP_400_BAD_REQUEST
        )

    rating = parse_rating(payload.rating)
    if rating is None:
        return error_response(
            message="Rating must be between 1 and 5.",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=status.HTTP_400_BAD_REQUEST
        )

    review = reviews.create(Review(
        id=create_review_id(),
        product_id=product_id,
        name=name,
        email=(payload.email or "").strip() or None,
        rating=rating,
        comment=comment,
        created_at=datetime.now(timezone.utc),
    ))
    logger.info("Review %s added for product %s", review.id, product_id)

    return ReviewCreatedOut(review=review, summary=reviews.rating_summary(product_id))
