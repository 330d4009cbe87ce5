import logging
import random
import time
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import BackgroundTasks, status

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ...util.mail_service import OrderMailService
from ..enum.order_enum import OFFLINE_PAYMENT_METHODS, OrderStatus
from ..schemas.order_schemas import OfflineOrderCreate, Order, OrderItem
from ..stores.order_store import OrderStore
from .inventory_ledger import InventoryLedger, SoldOutError

logger = logging.getLogger(__name__)


def create_order_id() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randint(1000, 9999)}"


def calc_total(items: List[OrderItem]) -> float:
    return sum((item.product.price or 0) * (item.quantity or 0) for item in items)


def status_subject_prefix(order_status: str) -> str:
    return order_status.replace("_", " ", 1).upper()


# ----------------- Offline (cash / wallet) orders -----------------


def create_offline_order(
    ledger: InventoryLedger,
    orders: OrderStore,
    mail_service: OrderMailService,
    background_tasks: BackgroundTasks,
    payload: OfflineOrderCreate,
) -> Order:
    if not payload.items:
        return error_response(
            message="Order items are required.",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=status.HTTP_400_BAD_REQUEST
        )

    if payload.customer is None or not payload.customer.is_complete():
        return error_response(
            message="Customer details are incomplete.",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=status.HTTP_400_BAD_REQUEST
        )

    if payload.payment_method not in OFFLINE_PAYMENT_METHODS:
        return error_response(
            message="Invalid payment method.",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=status.HTTP_400_BAD_REQUEST
        )

    # stock is taken before the order exists; a sold-out order is never saved
    try:
        ledger.reserve(payload.items)
    except SoldOutError as e:
        return error_response(
            message=str(e),
            status_code=AppStatusCode.INVENTORY_SOLD_OUT,
            http_status=status.HTTP_409_CONFLICT
        )

    order = Order(
        id=create_order_id(),
        payment_method=payload.payment_method,
        customer=payload.customer,
        items=payload.items,
        total=calc_total(payload.items),
        created_at=datetime.now(timezone.utc),
        status=OrderStatus.pending.value,
    )
    orders.save(order)
    logger.info("Created %s order %s for %.2f",
                order.payment_method, order.id, order.total)

    background_tasks.add_task(mail_service.send_order_emails, order)
    return order


# ----------------- Admin order management -----------------


def list_orders(
    orders: OrderStore,
    order_status: Optional[str] = None,
    payment_method: Optional[str] = None,
    limit: int = 100,
) -> List[Order]:
    return orders.list_orders(status=order_status, payment_method=payment_method, limit=limit)


def update_order_status(
    orders: OrderStore,
    mail_service: OrderMailService,
    background_tasks: BackgroundTasks,
    order_id: str,
    order_status: Optional[str],
) -> Order:
    valid_statuses = {s.value for s in OrderStatus}
    if order_status not in valid_statuses:
        return error_response(
            message="Invalid order status.",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=status.HTTP_400_BAD_REQUEST
        )

    updated = orders.update(order_id, {"status": order_status})
    if not updated:
        return error_response(
            message="Order not found.",
            status_code=AppStatusCode.NOT_FOUND,
            http_status=status.HTTP_404_NOT_FOUND
        )

    logger.info("Order %s moved to %s", order_id, order_status)
    if order_status != OrderStatus.pending.value:
        background_tasks.add_task(
            mail_service.send_order_emails, updated, status_subject_prefix(order_status))
    return updated
