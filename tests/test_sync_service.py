import pytest

from domain.errors import ValidationError
from domain.models import OrderStatus, ReceiptType, SupplierOrder, SupplierOrderStatus, UnitLabel
from services import supplier_service, sync_service
from utils.data_migrator import dedupe_rows


def test_to_record_uses_camel_case_and_enum_values(store):
    record = sync_service.to_record(store.inventory[0])

    assert record["branchId"] == "2"
    assert record["type"] == "Sales Invoice"
    assert record["currentSeriesEnd"] == 5000
    assert "branch_id" not in record


def test_from_record_parses_types():
    row = {
        "id": "SUP-9", "branchId": 3, "type": "Delivery Receipt", "quantityUnits": "4",
        "status": "DELIVERED", "requestDate": "2023-11-01", "amount": "150.5",
        "isPaid": 1, "someExtraColumn": "ignored",
    }
    order = sync_service.from_record(SupplierOrder, row)

    assert order.branch_id == "3"
    assert order.type == ReceiptType.DELIVERY_RECEIPT
    assert order.status == SupplierOrderStatus.DELIVERED
    assert (order.quantity_units, order.amount, order.is_paid) == (4, 150.5, True)


def test_from_record_rejects_bad_rows():
    with pytest.raises(ValidationError):
        sync_service.from_record(SupplierOrder, {"id": "SUP-1", "branchId": "2"})
    with pytest.raises(ValidationError):
        sync_service.from_record(SupplierOrder, {
            "id": "SUP-1", "branchId": "2", "type": "Receipt of Nothing", "quantityUnits": 1,
            "status": "REQUESTED", "requestDate": "2023-11-01",
        })


def test_export_collections(store, fake_supabase):
    delivered = supplier_service.request_from_supplier(store, "2", ReceiptType.SALES_INVOICE, 2)
    supplier_service.confirm_supplier_delivery(store, delivered.id, "BI-1", 500, "DR-1")
    supplier_service.request_from_supplier(store, "3", ReceiptType.SALES_INVOICE, 2)

    results = sync_service.export_collections(store)

    assert all(ok for ok, _, _ in results.values())
    assert results["Cashwrap-Receipt"][2] == 4
    assert results["Warehouse-Inventory"][2] == 5
    assert results["Supplier-Orders"][2] == 2
    assert results["Billing-Records"][2] == 1
    assert fake_supabase.conflicts["Cashwrap-Receipt"] == "branchId,type"
    assert fake_supabase.tables["Billing-Records"][0]["billingInvoiceNo"] == "BI-1"


def test_export_reports_failure_per_table(store, fake_supabase):
    fake_supabase.failing.add("Logistics-Tracking")

    results = sync_service.export_collections(store)

    assert results["Logistics-Tracking"][0] is False
    assert results["User-Accounts"][0] is True


def test_import_replaces_collection(store, fake_supabase):
    fake_supabase.tables["Logistics-Tracking"] = [{
        "id": "ord_40", "branchId": "3", "branchName": "Seaside Cebu", "company": "PMCI",
        "type": "Sales Invoice", "quantityUnits": 2, "status": "IN_TRANSIT",
        "requestDate": "2023-12-01", "seriesStart": 10001, "seriesEnd": 11000,
    }]

    ok, _, count = sync_service.import_collection(store, "orders")

    assert ok and count == 1
    assert [o.id for o in store.orders] == ["ord_40"]
    assert store.orders[0].status == OrderStatus.IN_TRANSIT
    assert store.next_id("ord_") == "ord_41"


def test_import_groups_warehouse_by_branch(store, fake_supabase):
    fake_supabase.tables["Warehouse-Inventory"] = [
        {"branchId": "2", "type": "Sales Invoice", "totalUnits": 3, "receiptsPerUnit": 500, "unitLabel": "Box"},
        {"branchId": "2", "type": "Service Invoice", "totalUnits": 1, "receiptsPerUnit": 50, "unitLabel": "Booklet"},
        {"branchId": "4", "type": "Service Invoice", "totalUnits": 7, "receiptsPerUnit": 50, "unitLabel": "Booklet"},
    ]

    sync_service.import_collection(store, "warehouse")

    assert sorted(store.warehouse) == ["2", "4"]
    assert [i.total_units for i in store.warehouse["2"]] == [3, 1]
    assert store.warehouse["4"][0].unit_label == UnitLabel.BOOKLET


def test_import_empty_remote_keeps_local(store, fake_supabase):
    before = store.snapshot()

    ok, msg, count = sync_service.import_collection(store, "inventory")

    assert ok and count == 0
    assert "kept" in msg
    assert store.snapshot() == before


def test_import_failure_keeps_local(store, fake_supabase):
    fake_supabase.failing.add("User-Accounts")
    before = store.snapshot()

    ok, _, _ = sync_service.import_collection(store, "users")

    assert ok is False
    assert store.snapshot() == before


def test_import_malformed_row_replaces_nothing(store, fake_supabase):
    fake_supabase.tables["Supplier-Orders"] = [
        {"id": "SUP-1", "branchId": "2", "type": "Sales Invoice", "quantityUnits": 1,
         "status": "REQUESTED", "requestDate": "2023-11-01"},
        {"id": "SUP-2", "branchId": "2", "type": "Sales Invoice", "quantityUnits": 1,
         "status": "LOST"},
    ]
    supplier_service.request_from_supplier(store, "2", ReceiptType.SALES_INVOICE, 1)
    before = store.snapshot()

    with pytest.raises(ValidationError):
        sync_service.import_collection(store, "supplier_orders")
    assert store.snapshot() == before


def test_unknown_collection(store):
    with pytest.raises(ValueError):
        sync_service.import_collection(store, "ledgers")


def test_dedupe_rows_last_wins_and_skips_missing_keys():
    rows = [
        {"branchId": "2", "type": "SI", "n": 1},
        {"branchId": "2", "type": "SI", "n": 2},
        {"branchId": "", "type": "SI", "n": 3},
        {"branchId": "3", "type": "SI", "n": 4},
    ]
    assert [r["n"] for r in dedupe_rows(rows, ["branchId", "type"])] == [2, 4]


@pytest.mark.parametrize("raw, expected", [
    (True, True), (False, False), (1, True), (0, False),
    ("true", True), ("FALSE", False), ("1", True), ("0", False),
])
def test_from_record_parses_is_paid(raw, expected):
    row = {
        "id": "SUP-3", "branchId": "2", "type": "Sales Invoice", "quantityUnits": 1,
        "status": "DELIVERED", "requestDate": "2023-11-01", "isPaid": raw,
    }
    assert sync_service.from_record(SupplierOrder, row).is_paid is expected


def test_from_record_rejects_unknown_is_paid():
    row = {
        "id": "SUP-3", "branchId": "2", "type": "Sales Invoice", "quantityUnits": 1,
        "status": "DELIVERED", "requestDate": "2023-11-01", "isPaid": "maybe",
    }
    with pytest.raises(ValidationError):
        sync_service.from_record(SupplierOrder, row)
