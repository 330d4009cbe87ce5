import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..data.default_inventory import DEFAULT_INVENTORY
from ..models.inventory import InventoryItem
from ..schemas.inventory_schemas import InventoryRecord
from .json_file import JsonFileCollection

logger = logging.getLogger(__name__)


def seed_records(seed: Iterable[dict]) -> List[InventoryRecord]:
    now = datetime.now(timezone.utc)
    return [InventoryRecord.model_validate({**doc, "updatedAt": now}) for doc in seed]


def dump_record(record: InventoryRecord) -> dict:
    return record.model_dump(mode="json", by_alias=True)


class InventoryStore(ABC):
    """Document collection holding one InventoryRecord per product id."""

    @abstractmethod
    def read_all(self) -> List[InventoryRecord]:
        """Return every record, normalized."""

    @abstractmethod
    def find_by_id(self, product_id: str) -> Optional[InventoryRecord]:
        """Return the record for a product id, or None."""

    @abstractmethod
    def bulk_upsert(self, records: List[InventoryRecord]) -> None:
        """Insert or replace records by id in one write."""

    @abstractmethod
    def delete_missing(self, keep_ids: Iterable[str]) -> int:
        """Delete records whose id is not in keep_ids, returning the count."""


class FileInventoryStore(InventoryStore):

    def __init__(self, path: str, seed: Optional[List[dict]] = None):
        seed = DEFAULT_INVENTORY if seed is None else seed
        self.collection = JsonFileCollection(
            path, lambda: [dump_record(r) for r in seed_records(seed)])

    @classmethod
    def in_dir(cls, data_dir: str, seed: Optional[List[dict]] = None) -> "FileInventoryStore":
        return cls(os.path.join(data_dir, "inventory.json"), seed=seed)

    def _parse(self, raw: list) -> List[InventoryRecord]:
        records = []
        for doc in raw:
            if not isinstance(doc, dict) or not doc.get("id"):
                logger.warning("Skipping inventory document without id: %r", doc)
                continue
            records.append(InventoryRecord.model_validate(doc))
        return records

    def read_all(self) -> List[InventoryRecord]:
        with self.collection.lock:
            raw = self.collection.read()
            records = self._parse(raw)
            normalized = [dump_record(r) for r in records]
            if normalized != raw:
                self.collection.write(normalized)
            return records

    def find_by_id(self, product_id: str) -> Optional[InventoryRecord]:
        return next((r for r in self.read_all() if r.id == product_id), None)

    def bulk_upsert(self, records: List[InventoryRecord]) -> None:
        with self.collection.lock:
            current = self._parse(self.collection.read())
            index = {r.id: i for i, r in enumerate(current)}
            for record in records:
                if record.id in index:
                    current[index[record.id]] = record
                else:
                    index[record.id] = len(current)
                    current.append(record)
            self.collection.write([dump_record(r) for r in current])

    def delete_missing(self, keep_ids: Iterable[str]) -> int:
        keep = set(keep_ids)
        with self.collection.lock:
            current = self._parse(self.collection.read())
            kept = [r for r in current if r.id in keep]
            self.collection.write([dump_record(r) for r in kept])
            return len(current) - len(kept)


class SqlInventoryStore(InventoryStore):

    def __init__(self, session_factory: Callable[[], Session], seed: Optional[List[dict]] = None):
        self.session_factory = session_factory
        self.seed = DEFAULT_INVENTORY if seed is None else seed

    @staticmethod
    def _to_record(row: InventoryItem) -> InventoryRecord:
        return InventoryRecord(
            id=row.id,
            name=row.name,
            stock_quantity=row.stock_quantity,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _apply(row: InventoryItem, record: InventoryRecord) -> None:
        row.name = record.name
        row.stock_quantity = record.stock_quantity
        row.in_stock = record.in_stock
        row.updated_at = record.updated_at

    def _ensure_seeded(self, db: Session) -> None:
        count = db.query(func.count(InventoryItem.id)).scalar()
        if count or not self.seed:
            return

        logger.info("Seeding empty inventory table with %d products", len(self.seed))
        for record in seed_records(self.seed):
            row = InventoryItem(id=record.id)
            self._apply(row, record)
            db.add(row)
        db.commit()

    def read_all(self) -> List[InventoryRecord]:
        with self.session_factory() as db:
            self._ensure_seeded(db)
            rows = db.query(InventoryItem).all()
            records = [self._to_record(row) for row in rows]

            # repair rows whose stored stock or flag drifted
            dirty = False
            for row, record in zip(rows, records):
                if row.stock_quantity != record.stock_quantity or row.in_stock != record.in_stock:
                    row.stock_quantity = record.stock_quantity
                    row.in_stock = record.in_stock
                    dirty = True
            if dirty:
                db.commit()
            return records

    def find_by_id(self, product_id: str) -> Optional[InventoryRecord]:
        with self.session_factory() as db:
            self._ensure_seeded(db)
            row = db.get(InventoryItem, product_id)
            return self._to_record(row) if row else None

    def bulk_upsert(self, records: List[InventoryRecord]) -> None:
        if not records:
            return

        with self.session_factory() as db:
            for record in records:
                row = db.get(InventoryItem, record.id)
                if row is None:
                    row = InventoryItem(id=record.id)
                    db.add(row)
                self._apply(row, record)
            db.commit()

    def delete_missing(self, keep_ids: Iterable[str]) -> int:
        keep = list(keep_ids)
        with self.session_factory() as db:
            deleted = db.query(InventoryItem).filter(
                InventoryItem.id.not_in(keep)
            ).delete(synchronize_session=False)
            db.commit()
            return deleted
