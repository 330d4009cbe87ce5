import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..models.orders import Order as OrderRow
from ..schemas.order_schemas import Order
from .json_file import JsonFileCollection


def dump_order(order: Order) -> dict:
    return order.model_dump(mode="json", by_alias=True, exclude_none=True)


def apply_patch(order: Order, patch: dict) -> Order:
    return Order.model_validate({
        **order.model_dump(),
        **patch,
        "updated_at": datetime.now(timezone.utc),
    })


class OrderStore(ABC):

    @abstractmethod
    def save(self, order: Order) -> Order:
        """Persist a new order."""

    @abstractmethod
    def list_orders(self, status: Optional[str] = None, payment_method: Optional[str] = None,
                    limit: int = 100) -> List[Order]:
        """Newest orders first, optionally filtered."""

    @abstractmethod
    def find_by_id(self, order_id: str) -> Optional[Order]:
        """Return an order or None."""

    @abstractmethod
    def update(self, order_id: str, patch: dict) -> Optional[Order]:
        """Apply a partial update, stamping updated_at. None when not found."""


class FileOrderStore(OrderStore):

    def __init__(self, path: str):
        self.collection = JsonFileCollection(path)

    @classmethod
    def in_dir(cls, data_dir: str) -> "FileOrderStore":
        return cls(os.path.join(data_dir, "orders.json"))

    def _read(self) -> List[Order]:
        return [Order.model_validate(doc) for doc in self.collection.read()]

    def save(self, order: Order) -> Order:
        with self.collection.lock:
            documents = self.collection.read()
            documents.insert(0, dump_order(order))
            self.collection.write(documents)
        return order

    def list_orders(self, status=None, payment_method=None, limit=100) -> List[Order]:
        orders = [
            order for order in self._read()
            if (not status or order.status == status)
            and (not payment_method or order.payment_method == payment_method)
        ]
        return orders[:max(0, limit)]

    def find_by_id(self, order_id: str) -> Optional[Order]:
        return next((o for o in self._read() if o.id == order_id), None)

    def update(self, order_id: str, patch: dict) -> Optional[Order]:
        with self.collection.lock:
            orders = self._read()
            for index, order in enumerate(orders):
                if order.id != order_id:
                    continue
                updated = apply_patch(order, patch)
                orders[index] = updated
                self.collection.write([dump_order(o) for o in orders])
                return updated
        return None


class SqlOrderStore(OrderStore):

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    @staticmethod
    def _to_order(row: OrderRow) -> Order:
        return Order.model_validate({
            "id": row.id,
            "payment_method": row.payment_method,
            "customer": row.customer,
            "items": row.items,
            "total": float(row.total or 0),
            "status": row.status,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
            "cancel_reason": row.cancel_reason,
        })

    def save(self, order: Order) -> Order:
        document = dump_order(order)
        with self.session_factory() as db:
            db.add(OrderRow(
                id=order.id,
                payment_method=order.payment_method,
                status=order.status,
                customer=document["customer"],
                items=document["items"],
                total=order.total,
                cancel_reason=order.cancel_reason,
                created_at=order.created_at,
                updated_at=order.updated_at,
            ))
            db.commit()
        return order

    def list_orders(self, status=None, payment_method=None, limit=100) -> List[Order]:
        with self.session_factory() as db:
            query = db.query(OrderRow)
            if status:
                query = query.filter(OrderRow.status == status)
            if payment_method:
                query = query.filter(OrderRow.payment_method == payment_method)
            rows = query.order_by(OrderRow.created_at.desc()).limit(max(0, limit)).all()
            return [self._to_order(row) for row in rows]

    def find_by_id(self, order_id: str) -> Optional[Order]:
        with self.session_factory() as db:
            row = db.get(OrderRow, order_id)
            return self._to_order(row) if row else None

    def update(self, order_id: str, patch: dict) -> Optional[Order]:
        with self.session_factory() as db:
            row = db.get(OrderRow, order_id)
            if not row:
                return None

            for k, v in patch.items():
                setattr(row, k, v)
            row.updated_at = datetime.now(timezone.utc)

            db.commit()
            db.refresh(row)
            return self._to_order(row)
