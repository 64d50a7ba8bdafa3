# cashwrap/services/supplier_service.py
#
# Supplier -> warehouse replenishment:
#   REQUESTED -> PROCESSED -> SHIPPED -> DELIVERED
# Billing fields (PRF number, payment) are edited after delivery.

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from domain.errors import NotFoundError, PreconditionError, ValidationError
from domain.models import (
    SUPPLIER_STATUS_SEQUENCE,
    ReceiptType,
    SupplierOrder,
    SupplierOrderStatus,
    UserRole,
)
from services import inventory_service, warehouse_service
from services.store import ReceiptStore
from utils.formatting import today_iso

logger = logging.getLogger(__name__)


@dataclass
class BillingTotals:
    paid: float
    outstanding: float
    invoice_count: int


def get_supplier_order(store: ReceiptStore, order_id: str) -> SupplierOrder:
    for order in store.supplier_orders:
        if order.id == order_id:
            return order
    raise NotFoundError(f"Supplier order {order_id} not found")


def request_from_supplier(
        store: ReceiptStore,
        branch_id: str,
        receipt_type: ReceiptType,
        units: int,
        request_date: Optional[str] = None,
) -> SupplierOrder:
    if not any(u.id == branch_id and u.role == UserRole.BRANCH for u in store.users):
        raise NotFoundError(f"Branch {branch_id} not found")
    try:
        units = int(units)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number") from None
    if units < 1:
        raise ValidationError("Quantity must be at least 1")

    order = SupplierOrder(
        id=store.next_id("SUP-"),
        branch_id=branch_id,
        type=receipt_type,
        quantity_units=units,
        status=SupplierOrderStatus.REQUESTED,
        request_date=request_date or today_iso(),
        is_paid=False,
    )
    store.supplier_orders.insert(0, order)

    logger.info(
        "Supplier order %s requested branch=%s type=%s units=%d",
        order.id, branch_id, receipt_type.value, order.quantity_units,
    )
    return order


def update_supplier_status(store: ReceiptStore, order_id: str, status: SupplierOrderStatus) -> SupplierOrder:
    """
    Move a supplier order forward to PROCESSED or SHIPPED. Delivery goes
    through `confirm_supplier_delivery` because it carries billing data.
    """
    order = get_supplier_order(store, order_id)

    if status == SupplierOrderStatus.DELIVERED:
        raise PreconditionError("Use delivery confirmation to mark a supplier order delivered")

    current_pos = SUPPLIER_STATUS_SEQUENCE.index(order.status)
    target_pos = SUPPLIER_STATUS_SEQUENCE.index(status)
    if target_pos <= current_pos:
        raise PreconditionError(
            f"Supplier order {order.id} is {order.status.value}, cannot move to {status.value}"
        )

    order.status = status
    logger.info("Supplier order %s -> %s", order.id, status.value)
    return order


def confirm_supplier_delivery(
        store: ReceiptStore,
        order_id: str,
        billing_invoice_no: str,
        amount: float,
        delivery_receipt_no: str,
        delivery_date: Optional[str] = None,
) -> SupplierOrder:
    """
    Stamp billing details and add the delivered units to the branch's
    warehouse allocation (created if the branch never had this type).
    """
    order = get_supplier_order(store, order_id)
    if order.status == SupplierOrderStatus.DELIVERED:
        raise PreconditionError(f"Supplier order {order.id} is already delivered")

    if not billing_invoice_no or not billing_invoice_no.strip():
        raise ValidationError("Billing invoice number is required")
    if not delivery_receipt_no or not delivery_receipt_no.strip():
        raise ValidationError("Delivery receipt number is required")
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number") from None
    if amount < 0:
        raise ValidationError("Amount cannot be negative")

    with store.transaction():
        order.billing_invoice_no = billing_invoice_no.strip()
        order.amount = amount
        order.delivery_receipt_no = delivery_receipt_no.strip()
        order.delivery_date = delivery_date or today_iso()
        order.status = SupplierOrderStatus.DELIVERED
        warehouse_service.adjust(store, order.branch_id, order.type, order.quantity_units)

    logger.info(
        "Supplier order %s delivered invoice=%s units=%d",
        order.id, order.billing_invoice_no, order.quantity_units,
    )
    return order


def _require_delivered(order: SupplierOrder) -> None:
    if order.status != SupplierOrderStatus.DELIVERED:
        raise PreconditionError(f"Supplier order {order.id} has not been delivered yet")


def attach_prf_number(store: ReceiptStore, order_id: str, prf_number: str) -> SupplierOrder:
    order = get_supplier_order(store, order_id)
    _require_delivered(order)
    if order.prf_number:
        raise PreconditionError(f"Supplier order {order.id} already has PRF {order.prf_number}")
    if not prf_number or not prf_number.strip():
        raise ValidationError("PRF number is required")

    order.prf_number = prf_number.strip()
    logger.info("Supplier order %s PRF=%s", order.id, order.prf_number)
    return order


def set_paid(store: ReceiptStore, order_id: str, is_paid: bool = True) -> SupplierOrder:
    order = get_supplier_order(store, order_id)
    _require_delivered(order)
    order.is_paid = bool(is_paid)
    logger.info("Supplier order %s paid=%s", order.id, order.is_paid)
    return order


def open_orders(store: ReceiptStore) -> List[SupplierOrder]:
    return [o for o in store.supplier_orders if o.status != SupplierOrderStatus.DELIVERED]


def billing_records(store: ReceiptStore, query: str = "") -> List[SupplierOrder]:
    q = (query or "").strip().lower()
    result = []
    for o in store.supplier_orders:
        if o.status != SupplierOrderStatus.DELIVERED:
            continue
        if q:
            haystack = [
                inventory_service.branch_name_for(store, o.branch_id),
                o.billing_invoice_no or "",
                o.prf_number or "",
            ]
            if not any(q in h.lower() for h in haystack):
                continue
        result.append(o)
    return result


def billing_totals(orders: Iterable[SupplierOrder]) -> BillingTotals:
    paid = 0.0
    outstanding = 0.0
    count = 0
    for o in orders:
        count += 1
        if o.is_paid:
            paid += o.amount or 0
        else:
            outstanding += o.amount or 0
    return BillingTotals(paid=paid, outstanding=outstanding, invoice_count=count)


def remove_branch(store: ReceiptStore, branch_id: str) -> int:
    before = len(store.supplier_orders)
    store.supplier_orders = [o for o in store.supplier_orders if o.branch_id != branch_id]
    return before - len(store.supplier_orders)
