import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from ..schemas.inventory_schemas import (
    CatalogProduct, CatalogSyncResult, InventoryRecord, ProductAvailability)
from ..schemas.order_schemas import OrderItem
from ..stores.inventory_store import InventoryStore

logger = logging.getLogger(__name__)


class SoldOutError(Exception):
    """One or more line items ask for more than the available stock."""

    def __init__(self, unavailable: List[str]):
        self.unavailable = unavailable
        super().__init__(f"Some items are sold out: {', '.join(unavailable)}")


def availability_of(records: Sequence[InventoryRecord]) -> Dict[str, ProductAvailability]:
    return {
        record.id: ProductAvailability(
            in_stock=record.in_stock,
            stock_quantity=record.stock_quantity,
        )
        for record in records
    }


class InventoryLedger:
    """Authoritative stock per product id.

    Only ``reserve`` lowers stock. The whole read-modify-write of a
    reservation runs under ``_lock``, so two reservations served by the same
    ledger never both spend the same units. Store errors propagate unchanged.
    """

    def __init__(self, store: InventoryStore):
        self.store = store
        self._lock = threading.Lock()

    def list_inventory(self) -> List[InventoryRecord]:
        return self.store.read_all()

    def get_inventory_by_id(self, product_id: str) -> Optional[InventoryRecord]:
        return self.store.find_by_id(product_id)

    def get_availability(self) -> Dict[str, ProductAvailability]:
        return availability_of(self.store.read_all())

    @staticmethod
    def seed_missing_record(item: OrderItem) -> Optional[InventoryRecord]:
        """Build a record for a product the ledger has never seen.

        Stock comes from the client's product snapshot. Returns None when the
        line item carries no product id.
        """
        product = item.product
        if not product.id:
            return None

        return InventoryRecord(
            id=product.id,
            name=product.name or product.id,
            stock_quantity=product.stock_quantity,
            updated_at=datetime.now(timezone.utc),
        )

    def reserve(self, items: Sequence[OrderItem]) -> Dict[str, ProductAvailability]:
        """Take stock for every line item, or for none of them.

        Raises SoldOutError naming every unavailable product once all line
        items have been checked. Nothing is written in that case, including
        records seeded for unknown products.
        """
        with self._lock:
            working = {record.id: record for record in self.store.read_all()}
            accepted = []
            unavailable = []

            for item in items:
                product_id = item.product.id
                quantity = item.quantity
                if not product_id or quantity <= 0:
                    continue

                record = working.get(product_id)
                if record is None:
                    record = self.seed_missing_record(item)
                    working[product_id] = record
                    logger.info("Seeding inventory for unknown product %s with stock %d",
                                product_id, record.stock_quantity)

                available = max(0, record.stock_quantity)
                if available < quantity:
                    unavailable.append(item.product.name or product_id)
                    continue

                accepted.append((product_id, quantity))

            if unavailable:
                logger.warning("Reservation rejected, sold out: %s",
                               ", ".join(unavailable))
                raise SoldOutError(unavailable)

            now = datetime.now(timezone.utc)
            for product_id, quantity in accepted:
                record = working[product_id]
                working[product_id] = record.model_copy(update={
                    "stock_quantity": max(0, record.stock_quantity - quantity),
                    "updated_at": now,
                })

            self.store.bulk_upsert(list(working.values()))
            logger.info("Reserved stock for %d line items", len(accepted))

            return self.get_availability()

    def sync_from_catalog(self, products: Sequence[CatalogProduct]) -> CatalogSyncResult:
        """Strict sync against the canonical catalog.

        New products get the catalog stock, known products keep their stock
        and take the catalog name, and products missing from the catalog are
        deleted.
        """
        if not products:
            raise ValueError("Catalog contains no products.")

        with self._lock:
            existing = {record.id: record for record in self.store.read_all()}
            now = datetime.now(timezone.utc)
            changed = []
            inserted = updated = 0

            for product in products:
                record = existing.get(product.id)
                if record is None:
                    changed.append(InventoryRecord(
                        id=product.id,
                        name=product.name,
                        stock_quantity=product.stock_quantity,
                        updated_at=now,
                    ))
                    inserted += 1
                elif record.name != product.name:
                    changed.append(record.model_copy(
                        update={"name": product.name, "updated_at": now}))
                    updated += 1

            self.store.bulk_upsert(changed)
            deleted = self.store.delete_missing([p.id for p in products])

        return CatalogSyncResult(
            catalog_products=len(products),
            inserted=inserted,
            updated=updated,
            deleted=deleted,
        )
