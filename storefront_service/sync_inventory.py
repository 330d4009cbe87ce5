"""Strict-sync the inventory with the canonical product catalog.

Usage: python -m storefront_service.sync_inventory --catalog products.json

The catalog is a JSON array of products with at least ``id`` and ``name``.
New products are added with their catalog ``stockQuantity``, existing ones
keep their stock and take the catalog name, and anything not in the catalog
is removed from the inventory.
"""
import argparse
import json
import logging
import sys
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from shared.core.config import settings
from shared.core.database import create_tables
from .app.core.dependencies import get_inventory_ledger
from .app.schemas.inventory_schemas import CatalogProduct

logger = logging.getLogger("sync_inventory")


def load_catalog(path: str) -> List[CatalogProduct]:
    with open(path, "r", encoding="utf-8-sig") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array of products")

    products = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("id") or not entry.get("name"):
            logger.warning("Skipping catalog entry without id/name: %r", entry)
            continue
        products.append(CatalogProduct.model_validate(entry))
    return products


def sync_inventory(catalog_path: str) -> int:
    products = load_catalog(catalog_path)
    result = get_inventory_ledger().sync_from_catalog(products)

    logger.info("Inventory strict-sync completed.")
    logger.info("Catalog products parsed: %d", result.catalog_products)
    logger.info("Inserted: %d", result.inserted)
    logger.info("Updated: %d", result.updated)
    logger.info("Deleted: %d", result.deleted)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--catalog", required=True,
                        help="path to the product catalog JSON file")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s]: %(message)s"
    )
    create_tables()

    try:
        return sync_inventory(args.catalog)
    except (OSError, ValueError, SQLAlchemyError) as e:
        logger.error("Inventory strict-sync failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
