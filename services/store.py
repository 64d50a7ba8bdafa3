# cashwrap/services/store.py

import copy
import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List

from domain import seed
from domain.models import (
    InventoryEntry,
    ReceiptOrder,
    SupplierOrder,
    User,
    WarehouseItem,
)

logger = logging.getLogger(__name__)


@dataclass
class ReceiptStore:
    """
    Single in-memory container for every entity collection.

    Services mutate it only through their own functions; multi-collection
    transitions run inside `transaction()` so a failure halfway leaves the
    collections as they were.
    """
    users: List[User] = field(default_factory=list)
    inventory: List[InventoryEntry] = field(default_factory=list)
    orders: List[ReceiptOrder] = field(default_factory=list)  # newest first
    warehouse: Dict[str, List[WarehouseItem]] = field(default_factory=dict)
    supplier_orders: List[SupplierOrder] = field(default_factory=list)  # newest first
    id_counter: int = 0

    @classmethod
    def seeded(cls) -> "ReceiptStore":
        store = cls(
            users=seed.initial_users(),
            inventory=seed.initial_inventory(),
            orders=seed.initial_orders(),
            warehouse=seed.initial_warehouse(),
        )
        store.reserve_ids(u.id for u in store.users)
        store.reserve_ids(o.id for o in store.orders)
        return store

    def next_id(self, prefix: str) -> str:
        self.id_counter += 1
        return f"{prefix}{self.id_counter}"

    def reserve_ids(self, ids: Iterable[str]) -> None:
        """Move the counter past numeric suffixes of ids loaded from elsewhere."""
        for entity_id in ids:
            match = re.search(r"(\d+)$", entity_id or "")
            if match:
                self.id_counter = max(self.id_counter, int(match.group(1)))

    def snapshot(self) -> Dict[str, object]:
        return {
            "users": copy.deepcopy(self.users),
            "inventory": copy.deepcopy(self.inventory),
            "orders": copy.deepcopy(self.orders),
            "warehouse": copy.deepcopy(self.warehouse),
            "supplier_orders": copy.deepcopy(self.supplier_orders),
            "id_counter": self.id_counter,
        }

    def restore(self, snap: Dict[str, object]) -> None:
        self.users = snap["users"]
        self.inventory = snap["inventory"]
        self.orders = snap["orders"]
        self.warehouse = snap["warehouse"]
        self.supplier_orders = snap["supplier_orders"]
        self.id_counter = snap["id_counter"]

    @contextmanager
    def transaction(self) -> Iterator["ReceiptStore"]:
        snap = self.snapshot()
        try:
            yield self
        except Exception:
            logger.warning("Transaction rolled back")
            self.restore(snap)
            raise
