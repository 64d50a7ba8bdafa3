# cashwrap/domain/models.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    BRANCH = "BRANCH"


class ReceiptType(str, Enum):
    SALES_INVOICE = "Sales Invoice"
    COLLECTION_RECEIPT = "Collection Receipt"
    DELIVERY_RECEIPT = "Delivery Receipt"
    SERVICE_INVOICE = "Service Invoice"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"  # defined, no transition leads here


class SupplierOrderStatus(str, Enum):
    REQUESTED = "REQUESTED"
    PROCESSED = "PROCESSED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


# Forward order of the supplier state machine, used to reject backward moves.
SUPPLIER_STATUS_SEQUENCE = (
    SupplierOrderStatus.REQUESTED,
    SupplierOrderStatus.PROCESSED,
    SupplierOrderStatus.SHIPPED,
    SupplierOrderStatus.DELIVERED,
)


class UnitLabel(str, Enum):
    BOX = "Box"
    BOOKLET = "Booklet"


@dataclass
class User:
    """
    A login account. Branch accounts double as the branch record itself:
    the user id is the branch id everywhere else.
    """
    id: str
    username: str
    role: UserRole
    branch_name: Optional[str] = None
    company: Optional[str] = None
    tin_number: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class InventoryEntry:
    """
    Receipt counters for one branch x receipt type.
    """
    branch_id: str
    company: str
    type: ReceiptType
    current_series_start: int
    current_series_end: int
    last_used_number: int
    remaining_stock: int
    threshold: int
    last_update_date: Optional[str] = None
    last_updated_by: Optional[str] = None


@dataclass
class WarehouseItem:
    """
    Bulk stock held centrally for one branch x receipt type, in units.
    """
    branch_id: str
    type: ReceiptType
    total_units: int
    receipts_per_unit: int
    unit_label: UnitLabel


@dataclass
class ReceiptOrder:
    id: str
    branch_id: str
    branch_name: str
    company: str
    type: ReceiptType
    quantity_units: int  # boxes or booklets
    status: OrderStatus
    request_date: str
    delivery_date: Optional[str] = None
    series_start: Optional[int] = None
    series_end: Optional[int] = None
    received_by: Optional[str] = None


@dataclass
class SupplierOrder:
    id: str
    branch_id: str
    type: ReceiptType
    quantity_units: int
    status: SupplierOrderStatus
    request_date: str
    # billing fields, filled on delivery
    billing_invoice_no: Optional[str] = None
    amount: Optional[float] = None
    delivery_receipt_no: Optional[str] = None
    delivery_date: Optional[str] = None
    prf_number: Optional[str] = None
    is_paid: bool = False
