# cashwrap/services/sync_service.py
#
# Mapping between store entities and the flat camelCase records kept in the
# remote tables, plus the explicit import/export steps.

import logging
from dataclasses import MISSING, fields
from enum import Enum
from typing import Any, Dict, List, Tuple

import data_integrator
from domain.errors import ValidationError
from domain.models import (
    InventoryEntry,
    OrderStatus,
    ReceiptOrder,
    ReceiptType,
    SupplierOrder,
    SupplierOrderStatus,
    UnitLabel,
    User,
    UserRole,
    WarehouseItem,
)
from services import warehouse_service
from services.store import ReceiptStore

logger = logging.getLogger(__name__)

# kind -> (entity class, remote table, conflict columns)
COLLECTIONS = {
    "users": (User, "User-Accounts", ["id"]),
    "inventory": (InventoryEntry, "Cashwrap-Receipt", ["branchId", "type"]),
    "orders": (ReceiptOrder, "Logistics-Tracking", ["id"]),
    "warehouse": (WarehouseItem, "Warehouse-Inventory", ["branchId", "type"]),
    "supplier_orders": (SupplierOrder, "Supplier-Orders", ["id"]),
}

BILLING_TABLE = "Billing-Records"

ENUM_FIELDS = {
    "role": UserRole,
    "type": ReceiptType,
    "status": None,  # depends on the entity, see _status_enum
    "unit_label": UnitLabel,
}

INT_FIELDS = {
    "current_series_start", "current_series_end", "last_used_number",
    "remaining_stock", "threshold", "quantity_units", "series_start",
    "series_end", "total_units", "receipts_per_unit",
}

STR_FIELDS = {"id", "branch_id", "username", "company"}


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _status_enum(cls):
    return SupplierOrderStatus if cls is SupplierOrder else OrderStatus


def to_record(entity) -> Dict[str, Any]:
    record = {}
    for f in fields(entity):
        value = getattr(entity, f.name)
        if isinstance(value, Enum):
            value = value.value
        record[to_camel(f.name)] = value
    return record


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false", "1", "0"):
        return value.strip().lower() in ("true", "1")
    raise ValueError(f"not a boolean: {value!r}")


def from_record(cls, row: Dict[str, Any]):
    """
    Build an entity from a remote row. Unknown columns are ignored;
    missing required columns or bad enum values raise ValidationError.
    """
    kwargs = {}
    for f in fields(cls):
        key = to_camel(f.name)
        required = f.default is MISSING and f.default_factory is MISSING
        if key not in row or row[key] is None:
            if required:
                raise ValidationError(f"{cls.__name__} row is missing '{key}': {row}")
            continue

        value = row[key]
        try:
            if f.name in ENUM_FIELDS:
                enum_cls = ENUM_FIELDS[f.name] or _status_enum(cls)
                value = enum_cls(value)
            elif f.name in INT_FIELDS:
                value = int(value)
            elif f.name == "amount":
                value = float(value)
            elif f.name == "is_paid":
                value = _parse_bool(value)
            elif f.name in STR_FIELDS:
                value = str(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"{cls.__name__} row has bad '{key}': {e}") from None

        kwargs[f.name] = value
    return cls(**kwargs)


def collection_records(store: ReceiptStore, kind: str) -> List[Dict[str, Any]]:
    if kind == "users":
        entities = store.users
    elif kind == "inventory":
        entities = store.inventory
    elif kind == "orders":
        entities = store.orders
    elif kind == "warehouse":
        entities = warehouse_service.flatten(store)
    elif kind == "supplier_orders":
        entities = store.supplier_orders
    else:
        raise ValueError(f"Unknown collection: {kind}")
    return [to_record(e) for e in entities]


def billing_records(store: ReceiptStore) -> List[Dict[str, Any]]:
    return [
        to_record(o) for o in store.supplier_orders
        if o.status == SupplierOrderStatus.DELIVERED
    ]


def export_collections(store: ReceiptStore) -> Dict[str, Tuple[bool, str, int]]:
    """
    Push every local collection to its remote table.
    Failures are reported per table; local state is never touched.
    """
    results = {}
    for kind, (_, table, conflict_cols) in COLLECTIONS.items():
        results[table] = data_integrator.upsert_rows(table, collection_records(store, kind), conflict_cols)

    results[BILLING_TABLE] = data_integrator.upsert_rows(BILLING_TABLE, billing_records(store), ["id"])
    return results


def import_collection(store: ReceiptStore, kind: str) -> Tuple[bool, str, int]:
    """
    Replace one local collection with the remote table's rows.

    Only runs when asked; an empty remote table or a failed fetch leaves
    the local collection as it is. Every row is parsed before anything
    is replaced.
    """
    if kind not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {kind}")
    cls, table, _ = COLLECTIONS[kind]

    ok, msg, rows = data_integrator.fetch_table(table)
    if not ok:
        return False, msg, 0
    if not rows:
        logger.info("Import %s skipped: remote table empty", table)
        return True, "Remote table is empty, local data kept", 0

    entities = [from_record(cls, row) for row in rows]

    if kind == "warehouse":
        grouped: Dict[str, List[WarehouseItem]] = {}
        for item in entities:
            grouped.setdefault(item.branch_id, []).append(item)
        store.warehouse = grouped
    else:
        setattr(store, kind, entities)

    store.reserve_ids(getattr(e, "id", "") for e in entities)

    logger.info("Imported %d rows from %s into %s", len(entities), table, kind)
    return True, "Imported", len(entities)
