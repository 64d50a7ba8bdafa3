import pytest

from domain.errors import ValidationError
from domain.models import InventoryEntry, ReceiptType, UnitLabel
from services.reconciliation import (
    apply_consumption,
    assign_series_range,
    is_low_stock,
    remaining_series,
    threshold_for,
    unit_label_for,
    units_on_hand,
    units_to_receipts,
)


def _entry(**overrides):
    values = dict(
        branch_id="2",
        company="PMCI",
        type=ReceiptType.SALES_INVOICE,
        current_series_start=1000,
        current_series_end=5000,
        last_used_number=4850,
        remaining_stock=150,
        threshold=5000,
    )
    values.update(overrides)
    return InventoryEntry(**values)


@pytest.mark.parametrize("receipt_type", list(ReceiptType))
@pytest.mark.parametrize("units", [0, 1, 7])
def test_units_to_receipts(receipt_type, units):
    per_unit = 500 if receipt_type == ReceiptType.SALES_INVOICE else 50
    assert units_to_receipts(receipt_type, units) == units * per_unit


def test_labels_and_thresholds():
    assert unit_label_for(ReceiptType.SALES_INVOICE) == UnitLabel.BOX
    assert unit_label_for(ReceiptType.SERVICE_INVOICE) == UnitLabel.BOOKLET
    assert threshold_for(ReceiptType.SALES_INVOICE) == 5000
    assert threshold_for(ReceiptType.COLLECTION_RECEIPT) == 250


def test_assign_series_range_continues_after_current_end():
    assert assign_series_range(5000, 5, 500) == (5001, 7500)
    assert assign_series_range(0, 1, 50) == (1, 50)


def test_assign_series_range_rejects_empty_shipment():
    with pytest.raises(ValidationError):
        assign_series_range(5000, 0, 500)


def test_apply_consumption_reduces_remaining_stock():
    inv = _entry(remaining_stock=5000)
    updated = apply_consumption(inv, 5000)

    assert updated.last_used_number == 5000
    assert updated.remaining_stock == 4850
    # input untouched
    assert inv.last_used_number == 4850


def test_apply_consumption_floors_at_zero():
    updated = apply_consumption(_entry(remaining_stock=100), 5000)
    assert updated.remaining_stock == 0


@pytest.mark.parametrize("value", [4850, 4000, 5001])
def test_apply_consumption_rejects_out_of_range(value):
    with pytest.raises(ValidationError):
        apply_consumption(_entry(), value)


def test_increasing_consumption_never_increases_stock():
    inv = _entry(current_series_end=7500, remaining_stock=2650)
    previous = inv.remaining_stock
    for value in (4900, 5000, 5500, 6200, 7500):
        inv = apply_consumption(inv, value)
        assert 0 <= inv.remaining_stock <= previous
        previous = inv.remaining_stock


def test_derived_reads():
    inv = _entry()
    assert is_low_stock(inv)
    assert not is_low_stock(_entry(remaining_stock=5001))
    assert remaining_series(inv) == (4851, 5000)
    assert units_on_hand(1250, ReceiptType.SALES_INVOICE) == 2.5
