from domain import seed
from services.reconciliation import receipts_per_unit, unit_label_for


def test_warehouse_items_follow_unit_rules():
    items = [item for items in seed.initial_warehouse().values() for item in items]

    assert items
    for item in items:
        assert item.receipts_per_unit == receipts_per_unit(item.type)
        assert item.unit_label == unit_label_for(item.type)


def test_warehouse_items_belong_to_their_branch():
    for branch_id, items in seed.initial_warehouse().items():
        assert {item.branch_id for item in items} == {branch_id}
