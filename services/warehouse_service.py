# cashwrap/services/warehouse_service.py

import logging
from typing import List, Optional

from domain.errors import ValidationError
from domain.models import ReceiptType, WarehouseItem
from services.inventory_service import series_baseline
from services.reconciliation import receipts_per_unit, unit_label_for
from services.store import ReceiptStore

logger = logging.getLogger(__name__)


def get_items(store: ReceiptStore, branch_id: str) -> List[WarehouseItem]:
    return list(store.warehouse.get(branch_id, []))


def find_item(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType) -> Optional[WarehouseItem]:
    for item in store.warehouse.get(branch_id, []):
        if item.type == receipt_type:
            return item
    return None


def _new_item(branch_id: str, receipt_type: ReceiptType, total_units: int) -> WarehouseItem:
    return WarehouseItem(
        branch_id=branch_id,
        type=receipt_type,
        total_units=total_units,
        receipts_per_unit=receipts_per_unit(receipt_type),
        unit_label=unit_label_for(receipt_type),
    )


def ensure(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType) -> WarehouseItem:
    """
    Return the warehouse item for branch/type, creating an empty one
    (zero units) when the pair has never been stocked.
    """
    item = find_item(store, branch_id, receipt_type)
    if item is not None:
        return item

    item = _new_item(branch_id, receipt_type, 0)
    store.warehouse.setdefault(branch_id, []).append(item)
    logger.info("Warehouse item created for branch=%s type=%s", branch_id, receipt_type.value)
    return item


def adjust(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType, delta: int) -> WarehouseItem:
    """
    Add `delta` units (negative to take stock out). The result is clamped
    at zero; a missing item is created first.
    """
    item = ensure(store, branch_id, receipt_type)
    before = item.total_units
    item.total_units = max(0, item.total_units + delta)

    logger.info(
        "Warehouse adjust branch=%s type=%s delta=%+d (%d -> %d)",
        branch_id, receipt_type.value, delta, before, item.total_units,
    )
    return item


def replenish(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType, units: int) -> WarehouseItem:
    if units <= 0:
        raise ValidationError("Quantity must be positive")
    return adjust(store, branch_id, receipt_type, units)


def flatten(store: ReceiptStore) -> List[WarehouseItem]:
    items: List[WarehouseItem] = []
    for branch_items in store.warehouse.values():
        items.extend(branch_items)
    return items


def next_series_start(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType) -> int:
    """First receipt number the next shipment for branch/type will carry."""
    return series_baseline(store, branch_id, receipt_type) + 1


def remove_branch(store: ReceiptStore, branch_id: str) -> int:
    removed = store.warehouse.pop(branch_id, [])
    return len(removed)
