# cashwrap/domain/seed.py
#
# Demo data loaded into a fresh session when SEED_DEMO_DATA is on.

from typing import Dict, List

from domain.models import (
    InventoryEntry,
    OrderStatus,
    ReceiptOrder,
    ReceiptType,
    User,
    UserRole,
    WarehouseItem,
)
from services.reconciliation import receipts_per_unit, unit_label_for

ADMIN_USERNAME = "CW@Admin"


def initial_users() -> List[User]:
    return [
        User(id="1", username=ADMIN_USERNAME, role=UserRole.ADMIN),
        User(id="2", username="manila_br", role=UserRole.BRANCH, branch_name="Megamall", company="PMCI"),
        User(id="3", username="cebu_br", role=UserRole.BRANCH, branch_name="Seaside Cebu", company="PMCI"),
        User(id="4", username="davao_br", role=UserRole.BRANCH, branch_name="SM Davao", company="PEHI"),
    ]


def initial_inventory() -> List[InventoryEntry]:
    return [
        InventoryEntry("2", "PMCI", ReceiptType.SALES_INVOICE, 1000, 5000, 4850, 150, 5000),
        InventoryEntry("2", "PMCI", ReceiptType.COLLECTION_RECEIPT, 100, 500, 300, 200, 250),
        InventoryEntry("3", "PMCI", ReceiptType.SALES_INVOICE, 5001, 10000, 6000, 4000, 5000),
        InventoryEntry("4", "PEHI", ReceiptType.SERVICE_INVOICE, 20000, 25000, 24900, 100, 250),
    ]


def initial_orders() -> List[ReceiptOrder]:
    return [
        ReceiptOrder(
            id="ord_1",
            branch_id="2",
            branch_name="Megamall",
            company="PMCI",
            type=ReceiptType.SALES_INVOICE,
            quantity_units=5,
            status=OrderStatus.PENDING,
            request_date="2023-10-25",
        ),
    ]


def _item(branch_id: str, receipt_type: ReceiptType, units: int) -> WarehouseItem:
    return WarehouseItem(
        branch_id, receipt_type, units, receipts_per_unit(receipt_type), unit_label_for(receipt_type)
    )


def initial_warehouse() -> Dict[str, List[WarehouseItem]]:
    return {
        "2": [
            _item("2", ReceiptType.SALES_INVOICE, 15),
            _item("2", ReceiptType.COLLECTION_RECEIPT, 20),
        ],
        "3": [
            _item("3", ReceiptType.SALES_INVOICE, 10),
            _item("3", ReceiptType.DELIVERY_RECEIPT, 30),
        ],
        "4": [
            _item("4", ReceiptType.SERVICE_INVOICE, 25),
        ],
    }
