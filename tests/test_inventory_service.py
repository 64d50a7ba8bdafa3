import pytest

from domain.errors import NotFoundError, PreconditionError, ValidationError
from domain.models import ReceiptType
from services import inventory_service


def test_list_inventory_by_branch(store):
    rows = inventory_service.list_inventory(store, "2")
    assert {r.type for r in rows} == {ReceiptType.SALES_INVOICE, ReceiptType.COLLECTION_RECEIPT}
    assert len(inventory_service.list_inventory(store)) == 4


def test_consume_logs_consumption(store):
    # lastUsed 4850 -> 5000 on a 150-remaining series
    entry = inventory_service.consume(store, "2", ReceiptType.SALES_INVOICE, 5000, "2023-11-01", " Ana ")

    assert entry.last_used_number == 5000
    assert entry.remaining_stock == 0
    assert entry.last_update_date == "2023-11-01"
    assert entry.last_updated_by == "Ana"
    assert inventory_service.find_entry(store, "2", ReceiptType.SALES_INVOICE) is entry


def test_consume_after_delivery_extends_range(store):
    # Scenario B: after a delivery raised the series end to 7500,
    # logging 5200 with lastUsed 4850 takes 350 off.
    inventory_service.credit_delivery(store, "2", "PMCI", ReceiptType.SALES_INVOICE, 5001, 7500, 2500)
    before = inventory_service.find_entry(store, "2", ReceiptType.SALES_INVOICE).remaining_stock

    entry = inventory_service.consume(store, "2", ReceiptType.SALES_INVOICE, 5200, "2023-11-02", "Ben")

    assert entry.remaining_stock == before - 350


def test_consume_rejects_out_of_range_without_change(store):
    before = store.snapshot()
    with pytest.raises(ValidationError):
        inventory_service.consume(store, "2", ReceiptType.SALES_INVOICE, 6000, "2023-11-01", "Ana")
    assert store.snapshot() == before


def test_consume_requires_logged_by(store):
    with pytest.raises(ValidationError):
        inventory_service.consume(store, "2", ReceiptType.SALES_INVOICE, 4900, "2023-11-01", "  ")


def test_consume_unknown_pair(store):
    with pytest.raises(NotFoundError):
        inventory_service.consume(store, "2", ReceiptType.SERVICE_INVOICE, 10, "2023-11-01", "Ana")


def test_credit_delivery_creates_entry(empty_store):
    entry = inventory_service.credit_delivery(
        empty_store, "br_1", "PMCI", ReceiptType.DELIVERY_RECEIPT, 1, 500, 500, "2023-12-01"
    )

    assert entry.current_series_start == 1
    assert entry.current_series_end == 500
    assert entry.last_used_number == 0
    assert entry.remaining_stock == 500
    assert entry.threshold == 250


def test_credit_delivery_adds_to_existing(store):
    entry = inventory_service.credit_delivery(store, "3", "PMCI", ReceiptType.SALES_INVOICE, 10001, 12500, 2500)

    assert entry.current_series_start == 5001
    assert entry.current_series_end == 12500
    assert entry.remaining_stock == 6500


def test_low_stock_and_search(store):
    low = inventory_service.low_stock_entries(store)
    assert {(e.branch_id, e.type) for e in low} == {
        ("2", ReceiptType.SALES_INVOICE),
        ("2", ReceiptType.COLLECTION_RECEIPT),
        ("3", ReceiptType.SALES_INVOICE),
        ("4", ReceiptType.SERVICE_INVOICE),
    }

    assert [e.branch_id for e in inventory_service.search_inventory(store, "davao")] == ["4"]
    assert len(inventory_service.search_inventory(store, "pmci")) == 3
    assert len(inventory_service.search_inventory(store, "collection")) == 1


def test_series_baseline_includes_shipped_orders(store):
    assert inventory_service.series_baseline(store, "2", ReceiptType.SALES_INVOICE) == 5000
    assert inventory_service.series_baseline(store, "2", ReceiptType.DELIVERY_RECEIPT) == 0

    store.orders[0].series_end = 7500
    assert inventory_service.series_baseline(store, "2", ReceiptType.SALES_INVOICE) == 7500


def test_credit_delivery_rejects_series_gap(store):
    before = store.snapshot()

    with pytest.raises(PreconditionError):
        inventory_service.credit_delivery(store, "2", "PMCI", ReceiptType.SALES_INVOICE, 6001, 8500, 2500)

    assert store.snapshot() == before
