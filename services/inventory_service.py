# cashwrap/services/inventory_service.py

import logging
from typing import List, Optional

from domain.errors import NotFoundError, PreconditionError, ValidationError
from domain.models import InventoryEntry, ReceiptType
from services.reconciliation import apply_consumption, is_low_stock, threshold_for
from services.store import ReceiptStore
from utils.formatting import today_iso

logger = logging.getLogger(__name__)


def list_inventory(store: ReceiptStore, branch_id: Optional[str] = None) -> List[InventoryEntry]:
    if branch_id is None:
        return list(store.inventory)
    return [inv for inv in store.inventory if inv.branch_id == branch_id]


def find_entry(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType) -> Optional[InventoryEntry]:
    for inv in store.inventory:
        if inv.branch_id == branch_id and inv.type == receipt_type:
            return inv
    return None


def _index_of(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType) -> int:
    for idx, inv in enumerate(store.inventory):
        if inv.branch_id == branch_id and inv.type == receipt_type:
            return idx
    raise NotFoundError(f"No inventory for branch {branch_id} / {receipt_type.value}")


def consume(
        store: ReceiptStore,
        branch_id: str,
        receipt_type: ReceiptType,
        new_last_used: int,
        update_date: str,
        logged_by: str,
) -> InventoryEntry:
    """
    Log consumption: the branch reports the last receipt number it used.
    """
    idx = _index_of(store, branch_id, receipt_type)

    if not logged_by or not logged_by.strip():
        raise ValidationError("Please ensure all fields including 'Logged By' are filled.")
    if not update_date:
        raise ValidationError("Update date is required")

    current = store.inventory[idx]
    try:
        updated = apply_consumption(current, new_last_used)
    except ValidationError:
        logger.warning(
            "Rejected consumption branch=%s type=%s value=%s (series %s..%s)",
            branch_id, receipt_type.value, new_last_used,
            current.last_used_number + 1, current.current_series_end,
        )
        raise

    updated.last_update_date = update_date
    updated.last_updated_by = logged_by.strip()
    store.inventory[idx] = updated

    logger.info(
        "Consumption logged branch=%s type=%s last_used %d -> %d remaining=%d",
        branch_id, receipt_type.value, current.last_used_number,
        updated.last_used_number, updated.remaining_stock,
    )
    return updated


def credit_delivery(
        store: ReceiptStore,
        branch_id: str,
        company: str,
        receipt_type: ReceiptType,
        series_start: int,
        series_end: int,
        total_receipts: int,
        update_date: Optional[str] = None,
) -> InventoryEntry:
    """
    Add a received shipment to the branch ledger.

    - No entry yet: create one whose series starts at `series_start`,
      with nothing used so far.
    - Entry exists: add the receipts and raise the series end. The
      shipment must continue the ledger's series without a gap.
    """
    update_date = update_date or today_iso()
    existing = find_entry(store, branch_id, receipt_type)

    if existing is None:
        entry = InventoryEntry(
            branch_id=branch_id,
            company=company,
            type=receipt_type,
            current_series_start=series_start,
            current_series_end=series_end,
            last_used_number=series_start - 1,
            remaining_stock=total_receipts,
            threshold=threshold_for(receipt_type),
            last_update_date=update_date,
        )
        store.inventory.append(entry)
        logger.info(
            "Inventory created branch=%s type=%s series %d..%d",
            branch_id, receipt_type.value, series_start, series_end,
        )
        return entry

    if series_start > existing.current_series_end + 1:
        logger.warning(
            "Inventory credit rejected branch=%s type=%s: series %d..%d leaves a gap after %d",
            branch_id, receipt_type.value, series_start, series_end, existing.current_series_end,
        )
        raise PreconditionError(
            f"Series {series_start}-{series_end} does not continue the branch's series "
            f"(ends at {existing.current_series_end})"
        )

    existing.remaining_stock += total_receipts
    existing.current_series_end = max(existing.current_series_end, series_end)
    existing.threshold = threshold_for(receipt_type)
    existing.last_update_date = update_date

    logger.info(
        "Inventory credited branch=%s type=%s +%d receipts, series end %d",
        branch_id, receipt_type.value, total_receipts, existing.current_series_end,
    )
    return existing


def low_stock_entries(store: ReceiptStore) -> List[InventoryEntry]:
    return [inv for inv in store.inventory if is_low_stock(inv)]


def branch_name_for(store: ReceiptStore, branch_id: str) -> str:
    for user in store.users:
        if user.id == branch_id and user.branch_name:
            return user.branch_name
    return f"Branch {branch_id}"


def search_inventory(store: ReceiptStore, query: str = "") -> List[InventoryEntry]:
    q = (query or "").strip().lower()
    if not q:
        return list(store.inventory)

    return [
        inv for inv in store.inventory
        if q in branch_name_for(store, inv.branch_id).lower()
        or q in inv.company.lower()
        or q in inv.type.value.lower()
    ]


def sync_company(store: ReceiptStore, branch_id: str, company: str) -> int:
    changed = 0
    for inv in store.inventory:
        if inv.branch_id == branch_id and inv.company != company:
            inv.company = company
            changed += 1
    return changed


def series_baseline(store: ReceiptStore, branch_id: str, receipt_type: ReceiptType) -> int:
    """
    Highest receipt number already issued to branch/type: the ledger's
    series end, or the end of a shipment still on its way, whichever is
    larger. 0 when nothing was ever issued.
    """
    baseline = 0
    entry = find_entry(store, branch_id, receipt_type)
    if entry is not None:
        baseline = entry.current_series_end

    for order in store.orders:
        if order.branch_id == branch_id and order.type == receipt_type and order.series_end is not None:
            baseline = max(baseline, order.series_end)

    return baseline


def remove_branch(store: ReceiptStore, branch_id: str) -> int:
    before = len(store.inventory)
    store.inventory = [inv for inv in store.inventory if inv.branch_id != branch_id]
    return before - len(store.inventory)
