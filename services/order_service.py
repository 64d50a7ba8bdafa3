# cashwrap/services/order_service.py
#
# Branch -> warehouse receipt orders:
#   PENDING -> APPROVED -> IN_TRANSIT -> DELIVERED -> RECEIVED

import logging
from typing import Dict, List, Optional, Tuple

from domain.errors import NotFoundError, PreconditionError, ValidationError
from domain.models import OrderStatus, ReceiptOrder, ReceiptType, UserRole
from services import inventory_service, warehouse_service
from services.reconciliation import assign_series_range, receipts_per_unit, units_to_receipts
from services.store import ReceiptStore
from utils.formatting import today_iso

logger = logging.getLogger(__name__)

# UI action names available per status. Every status must be listed.
ORDER_ACTIONS: Dict[OrderStatus, Tuple[str, ...]] = {
    OrderStatus.PENDING: ("edit", "approve"),
    OrderStatus.APPROVED: ("ship",),
    OrderStatus.IN_TRANSIT: ("mark_delivered",),
    OrderStatus.DELIVERED: ("confirm_receipt",),
    OrderStatus.RECEIVED: (),
    OrderStatus.CANCELLED: (),
}


def available_actions(order: ReceiptOrder) -> Tuple[str, ...]:
    try:
        return ORDER_ACTIONS[order.status]
    except KeyError:
        raise ValueError(f"Unhandled order status: {order.status}") from None


def get_order(store: ReceiptStore, order_id: str) -> ReceiptOrder:
    for order in store.orders:
        if order.id == order_id:
            return order
    raise NotFoundError(f"Order {order_id} not found")


def _require_status(order: ReceiptOrder, expected: OrderStatus) -> None:
    if order.status != expected:
        logger.warning(
            "Order %s rejected: status is %s, expected %s",
            order.id, order.status.value, expected.value,
        )
        raise PreconditionError(
            f"Order {order.id} is {order.status.value}, expected {expected.value}"
        )


def _validate_units(units: int) -> int:
    try:
        units = int(units)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number") from None
    if units < 1:
        raise ValidationError("Quantity must be at least 1")
    return units


def request_receipts(
        store: ReceiptStore,
        branch_id: str,
        receipt_type: ReceiptType,
        units: int,
        request_date: Optional[str] = None,
) -> ReceiptOrder:
    """
    A branch asks the warehouse for `units` boxes/booklets of `receipt_type`.
    """
    units = _validate_units(units)
    branch = next((u for u in store.users if u.id == branch_id), None)
    if branch is None or branch.role != UserRole.BRANCH:
        raise NotFoundError(f"Branch {branch_id} not found")

    with store.transaction():
        order = ReceiptOrder(
            id=store.next_id("ord_"),
            branch_id=branch_id,
            branch_name=branch.branch_name or "",
            company=branch.company or "",
            type=receipt_type,
            quantity_units=units,
            status=OrderStatus.PENDING,
            request_date=request_date or today_iso(),
        )
        warehouse_service.ensure(store, branch_id, receipt_type)
        store.orders.insert(0, order)

    logger.info(
        "Order %s requested branch=%s type=%s units=%d",
        order.id, branch_id, receipt_type.value, units,
    )
    return order


def update_request(store: ReceiptStore, order_id: str, receipt_type: ReceiptType, units: int) -> ReceiptOrder:
    order = get_order(store, order_id)
    _require_status(order, OrderStatus.PENDING)
    units = _validate_units(units)

    with store.transaction():
        warehouse_service.ensure(store, order.branch_id, receipt_type)
        order.type = receipt_type
        order.quantity_units = units

    logger.info("Order %s edited type=%s units=%d", order.id, receipt_type.value, units)
    return order


def approve_order(store: ReceiptStore, order_id: str) -> ReceiptOrder:
    order = get_order(store, order_id)
    _require_status(order, OrderStatus.PENDING)
    order.status = OrderStatus.APPROVED
    logger.info("Order %s approved", order.id)
    return order


def ship_order(
        store: ReceiptStore,
        order_id: str,
        start_series: Optional[int] = None,
        ship_date: Optional[str] = None,
) -> ReceiptOrder:
    """
    Take the units out of the branch's warehouse allocation and assign
    the receipt series.

    The series continues from the highest number already issued to the
    branch for that type. An explicit `start_series` must be exactly that
    next number; it guards against shipping from a stale screen.
    """
    order = get_order(store, order_id)
    _require_status(order, OrderStatus.APPROVED)

    item = warehouse_service.find_item(store, order.branch_id, order.type)
    if item is None or item.total_units < order.quantity_units:
        on_hand = item.total_units if item else 0
        logger.warning(
            "Order %s not shipped: warehouse has %d, needs %d",
            order.id, on_hand, order.quantity_units,
        )
        raise PreconditionError(
            f"Insufficient warehouse stock in {order.branch_name}'s allocation "
            f"({on_hand} on hand, {order.quantity_units} needed)."
        )

    baseline = inventory_service.series_baseline(store, order.branch_id, order.type)
    if start_series is not None and start_series != baseline + 1:
        raise ValidationError(
            f"Start series must be {baseline + 1} (continues the series already issued to this branch)"
        )

    series_start, series_end = assign_series_range(
        baseline, order.quantity_units, receipts_per_unit(order.type)
    )

    with store.transaction():
        warehouse_service.adjust(store, order.branch_id, order.type, -order.quantity_units)
        order.series_start = series_start
        order.series_end = series_end
        order.delivery_date = ship_date or today_iso()
        order.status = OrderStatus.IN_TRANSIT

    logger.info(
        "Order %s shipped units=%d series %d..%d",
        order.id, order.quantity_units, series_start, series_end,
    )
    return order


def mark_delivered(store: ReceiptStore, order_id: str, delivery_date: Optional[str] = None) -> ReceiptOrder:
    order = get_order(store, order_id)
    _require_status(order, OrderStatus.IN_TRANSIT)
    order.delivery_date = delivery_date or today_iso()
    order.status = OrderStatus.DELIVERED
    logger.info("Order %s delivered", order.id)
    return order


def _earlier_unreceived(store: ReceiptStore, order: ReceiptOrder) -> Optional[ReceiptOrder]:
    # The ledger only grows contiguously, so shipments are received in series order.
    for other in store.orders:
        if (
            other.id != order.id
            and other.branch_id == order.branch_id
            and other.type == order.type
            and other.status in (OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED)
            and other.series_start is not None
            and other.series_start < order.series_start
        ):
            return other
    return None


def confirm_receipt(store: ReceiptStore, order_id: str, received_by: str) -> ReceiptOrder:
    """
    Branch acknowledges the delivery; the receipts go into its ledger.
    """
    order = get_order(store, order_id)
    _require_status(order, OrderStatus.DELIVERED)
    if not received_by or not received_by.strip():
        raise ValidationError("Receiver's name is required")
    if order.series_start is None or order.series_end is None:
        raise PreconditionError(f"Order {order.id} has no receipt series assigned")

    earlier = _earlier_unreceived(store, order)
    if earlier is not None:
        raise PreconditionError(
            f"Order {earlier.id} (series {earlier.series_start}-{earlier.series_end}) "
            f"must be received first"
        )

    total_receipts = units_to_receipts(order.type, order.quantity_units)

    with store.transaction():
        inventory_service.credit_delivery(
            store,
            branch_id=order.branch_id,
            company=order.company,
            receipt_type=order.type,
            series_start=order.series_start,
            series_end=order.series_end,
            total_receipts=total_receipts,
        )
        order.received_by = received_by.strip()
        order.status = OrderStatus.RECEIVED

    logger.info("Order %s received by %s (%d receipts)", order.id, order.received_by, total_receipts)
    return order


def list_orders(
        store: ReceiptStore,
        branch_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
) -> List[ReceiptOrder]:
    result = store.orders
    if branch_id is not None:
        result = [o for o in result if o.branch_id == branch_id]
    if status is not None:
        result = [o for o in result if o.status == status]
    return list(result)


def active_orders(store: ReceiptStore) -> List[ReceiptOrder]:
    return [o for o in store.orders if o.status != OrderStatus.RECEIVED]


def order_history(store: ReceiptStore, query: str = "") -> List[ReceiptOrder]:
    q = (query or "").strip().lower()
    return [
        o for o in store.orders
        if o.status == OrderStatus.RECEIVED
        and (not q or q in o.branch_name.lower() or q in o.type.value.lower())
    ]


def remove_branch(store: ReceiptStore, branch_id: str) -> int:
    before = len(store.orders)
    store.orders = [o for o in store.orders if o.branch_id != branch_id]
    return before - len(store.orders)
