import json
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ..core.dependencies import get_inventory_ledger, get_review_store
from ..crud import reviews_crud as crud
from ..crud.inventory_ledger import InventoryLedger
from ..schemas.inventory_schemas import AvailabilityOut
from ..schemas.review_schemas import ReviewCreate, ReviewCreatedOut, ReviewListOut
from ..stores.review_store import ReviewStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("/availability", response_model=AvailabilityOut)
def read_availability(ledger: InventoryLedger = Depends(get_inventory_ledger)):
    try:
        return AvailabilityOut(availability=ledger.get_availability())
    except (OSError, json.JSONDecodeError, SQLAlchemyError):
        logger.exception("Products availability error")
        return error_response(
            message="Failed to fetch product availability.",
            status_code=AppStatusCode.OPERATION_FAILED,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.get("/{product_id}/reviews", response_model=ReviewListOut)
def read_reviews(
    product_id: str,
    limit: int = 50,
    reviews: ReviewStore = Depends(get_review_store)
):
    return crud.get_product_reviews(reviews, product_id, limit=limit)


@router.post("/{product_id}/reviews", response_model=ReviewCreatedOut, status_code=status.HTTP_201_CREATED)
def create_review(
    product_id: str,
    review: ReviewCreate,
    reviews: ReviewStore = Depends(get_review_store)
):
    return crud.create_product_review(reviews, product_id, review)
