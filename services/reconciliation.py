# cashwrap/services/reconciliation.py
#
# Pure rules shared by the ledger, the warehouse and the order managers.
# Nothing here touches the store.

from dataclasses import replace
from typing import Tuple

from domain.errors import ValidationError
from domain.models import InventoryEntry, ReceiptType, UnitLabel

RECEIPTS_PER_BOX = 500
RECEIPTS_PER_BOOKLET = 50

SALES_INVOICE_THRESHOLD = 5000
DEFAULT_THRESHOLD = 250


def receipts_per_unit(receipt_type: ReceiptType) -> int:
    if receipt_type == ReceiptType.SALES_INVOICE:
        return RECEIPTS_PER_BOX
    return RECEIPTS_PER_BOOKLET


def units_to_receipts(receipt_type: ReceiptType, units: int) -> int:
    """
    Convert boxes/booklets to individual receipts.
    Example: 5 boxes of Sales Invoice -> 2500 receipts.
    """
    return units * receipts_per_unit(receipt_type)


def unit_label_for(receipt_type: ReceiptType) -> UnitLabel:
    if receipt_type == ReceiptType.SALES_INVOICE:
        return UnitLabel.BOX
    return UnitLabel.BOOKLET


def threshold_for(receipt_type: ReceiptType) -> int:
    if receipt_type == ReceiptType.SALES_INVOICE:
        return SALES_INVOICE_THRESHOLD
    return DEFAULT_THRESHOLD


def units_on_hand(remaining_receipts: int, receipt_type: ReceiptType) -> float:
    """Remaining receipts expressed in (fractional) boxes or booklets."""
    return remaining_receipts / receipts_per_unit(receipt_type)


def assign_series_range(current_end: int, units_shipped: int, per_unit: int) -> Tuple[int, int]:
    """
    Next contiguous series after `current_end`.

    Returns (start, end), both inclusive.
    """
    if units_shipped <= 0:
        raise ValidationError("Units shipped must be positive")
    if per_unit <= 0:
        raise ValidationError("Receipts per unit must be positive")

    start = current_end + 1
    end = start + units_shipped * per_unit - 1
    return start, end


def apply_consumption(inventory: InventoryEntry, new_last_used: int) -> InventoryEntry:
    """
    Advance `last_used_number` to `new_last_used` and take the difference
    off `remaining_stock` (never below zero).

    The input entry is left untouched; a new entry is returned.
    """
    if new_last_used <= inventory.last_used_number or new_last_used > inventory.current_series_end:
        raise ValidationError(
            f"Invalid range. Must be between {inventory.last_used_number + 1} "
            f"and {inventory.current_series_end}"
        )

    consumed = new_last_used - inventory.last_used_number
    return replace(
        inventory,
        last_used_number=new_last_used,
        remaining_stock=max(0, inventory.remaining_stock - consumed),
    )


def is_low_stock(inventory: InventoryEntry) -> bool:
    return inventory.remaining_stock <= inventory.threshold


def remaining_series(inventory: InventoryEntry) -> Tuple[int, int]:
    return inventory.last_used_number + 1, inventory.current_series_end
