from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from shared.core.auth import require_admin
from ..core.dependencies import get_inventory_ledger, get_mail_service, get_order_store
from ..crud import orders_crud as crud
from ..crud.inventory_ledger import InventoryLedger
from ..schemas.order_schemas import (
    OfflineOrderCreate, OfflineOrderOut, OrderListOut, OrderOut, OrderStatusUpdate)
from ..stores.order_store import OrderStore
from ...util.mail_service import OrderMailService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=OrderListOut, dependencies=[Depends(require_admin)])
def read_orders(
    status: Optional[str] = None,
    payment_method: Optional[str] = Query(None, alias="paymentMethod"),
    limit: int = 100,
    orders: OrderStore = Depends(get_order_store)
):
    return OrderListOut(orders=crud.list_orders(orders, status, payment_method, limit))


@router.patch("/{order_id}/status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    orders: OrderStore = Depends(get_order_store),
    mail_service: OrderMailService = Depends(get_mail_service)
):
    order = crud.update_order_status(
        orders, mail_service, background_tasks, order_id, update.status)
    return OrderOut(order=order)


@router.post("/offline", response_model=OfflineOrderOut, status_code=status.HTTP_201_CREATED)
def create_offline_order(
    payload: OfflineOrderCreate,
    background_tasks: BackgroundTasks,
    ledger: InventoryLedger = Depends(get_inventory_ledger),
    orders: OrderStore = Depends(get_order_store),
    mail_service: OrderMailService = Depends(get_mail_service)
):
    order = crud.create_offline_order(
        ledger, orders, mail_service, background_tasks, payload)
    return OfflineOrderOut(order_id=order.id)
