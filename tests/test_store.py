import pytest

from domain.models import ReceiptType
from services import warehouse_service
from services.store import ReceiptStore


def test_seeded_ids_do_not_collide(store):
    new_id = store.next_id("ord_")
    assert new_id not in {o.id for o in store.orders}
    assert new_id == "ord_5"


def test_transaction_rolls_back_on_error(store):
    before = store.snapshot()

    with pytest.raises(RuntimeError):
        with store.transaction():
            warehouse_service.adjust(store, "2", ReceiptType.SALES_INVOICE, -5)
            store.orders.clear()
            raise RuntimeError("boom")

    assert store.snapshot() == before


def test_reserve_ids():
    s = ReceiptStore()
    s.reserve_ids(["SUP-12", "br_3", "no-digits", ""])
    assert s.next_id("ord_") == "ord_13"
