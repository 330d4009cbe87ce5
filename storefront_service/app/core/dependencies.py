import logging
from functools import lru_cache

from shared.core.config import settings
from shared.core.database import StorefrontSessionLocal
from ..crud.inventory_ledger import InventoryLedger
from ..stores.inventory_store import FileInventoryStore, InventoryStore, SqlInventoryStore
from ..stores.order_store import FileOrderStore, OrderStore, SqlOrderStore
from ..stores.review_store import FileReviewStore, ReviewStore, SqlReviewStore
from ...util.mail_service import OrderMailService

logger = logging.getLogger(__name__)


def use_database() -> bool:
    return StorefrontSessionLocal is not None


def build_inventory_store() -> InventoryStore:
    if use_database():
        return SqlInventoryStore(StorefrontSessionLocal)
    return FileInventoryStore.in_dir(settings.DATA_DIR)


# One ledger per process: its lock is what serializes reservations
@lru_cache
def get_inventory_ledger() -> InventoryLedger:
    store = build_inventory_store()
    logger.info("Inventory ledger using %s", type(store).__name__)
    return InventoryLedger(store)


@lru_cache
def get_order_store() -> OrderStore:
    if use_database():
        return SqlOrderStore(StorefrontSessionLocal)
    return FileOrderStore.in_dir(settings.DATA_DIR)


@lru_cache
def get_review_store() -> ReviewStore:
    if use_database():
        return SqlReviewStore(StorefrontSessionLocal)
    return FileReviewStore.in_dir(settings.DATA_DIR)


@lru_cache
def get_mail_service() -> OrderMailService:
    return OrderMailService.from_settings()
