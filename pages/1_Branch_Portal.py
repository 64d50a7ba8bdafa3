import streamlit as st

from domain.models import OrderStatus, ReceiptType, UserRole
from element_component import confirmation_dialog, get_store, require_user, run_action, show_flash
from services import inventory_service, order_service
from services.reconciliation import (
    is_low_stock,
    remaining_series,
    threshold_for,
    unit_label_for,
    units_on_hand,
    units_to_receipts,
)
from utils.formatting import format_units, today_iso

st.set_page_config(
    page_title="Branch Portal",
    page_icon="🏪"
)

st.sidebar.header("🏪 Branch Portal")

store = get_store()
user = require_user(UserRole.BRANCH)

st.title(f"Branch Portal: {user.branch_name}")
show_flash()

# -------------------------------------------------------------------
# Inventory cards
# -------------------------------------------------------------------

inventory = inventory_service.list_inventory(store, user.id)

if not inventory:
    st.info("No receipt series on record yet. Request stock to get started.")

cols = st.columns(2)
for i, inv in enumerate(inventory):
    start, end = remaining_series(inv)
    with cols[i % 2].container(border=True):
        label = f"**{inv.type.value}**"
        if is_low_stock(inv):
            label += " :red[LOW STOCK]"
        st.markdown(label)
        st.metric(
            "Remaining",
            f"{inv.remaining_stock:,}",
            help=format_units(units_on_hand(inv.remaining_stock, inv.type), unit_label_for(inv.type).value),
        )
        st.caption(f"Remaining series: {start} - {end}")

# -------------------------------------------------------------------
# Log consumption
# -------------------------------------------------------------------

st.subheader("Log Consumption")

with st.form("log_consumption_form"):
    types = [inv.type for inv in inventory]
    sel_type = st.selectbox(
        "Receipt Type",
        types,
        index=None,
        format_func=lambda t: t.value,
        placeholder="Select a type...",
    )
    update_date = st.date_input("Update Date")
    new_last_used = st.number_input("Last Used Number", min_value=0, step=1)
    logged_by = st.text_input("Logged By", placeholder="Name of personnel")

    if st.form_submit_button("Save Update"):
        if sel_type is None:
            st.error("Please select a receipt type.")
        elif run_action(
            lambda: inventory_service.consume(
                store, user.id, sel_type, int(new_last_used), update_date.isoformat(), logged_by
            ),
            "Consumption logged",
        ):
            st.rerun()

# -------------------------------------------------------------------
# Request / edit stock
# -------------------------------------------------------------------

st.subheader("Request Stock")

my_orders = order_service.list_orders(store, branch_id=user.id)
pending = [o for o in my_orders if o.status == OrderStatus.PENDING]

pending_by_id = {o.id: o for o in pending}
edit_id = st.selectbox(
    "Edit a pending request",
    [None] + list(pending_by_id),
    format_func=lambda oid: "New request" if oid is None else (
        f"{oid} - {pending_by_id[oid].type.value} x{pending_by_id[oid].quantity_units}"
    ),
)
edit_target = pending_by_id.get(edit_id)

with st.form("request_form"):
    default_type = edit_target.type if edit_target else ReceiptType.SALES_INVOICE
    req_type = st.selectbox(
        "Receipt Type",
        list(ReceiptType),
        index=list(ReceiptType).index(default_type),
        format_func=lambda t: t.value,
    )
    units = st.number_input(
        f"Quantity ({unit_label_for(req_type).value}s)",
        min_value=1,
        step=1,
        value=edit_target.quantity_units if edit_target else 5,
    )
    st.caption(
        f"Threshold for alert: {threshold_for(req_type):,} receipts | "
        f"Total receipts to be added: {units_to_receipts(req_type, int(units)):,}"
    )

    if st.form_submit_button("Update Request" if edit_target else "Submit Request"):
        if edit_target:
            ok = run_action(
                lambda: order_service.update_request(store, edit_target.id, req_type, int(units)),
                f"Request {edit_target.id} updated",
            )
        else:
            ok = run_action(
                lambda: order_service.request_receipts(store, user.id, req_type, int(units), today_iso()),
                "Request submitted",
            )
        if ok:
            st.rerun()

# -------------------------------------------------------------------
# Recent logistics
# -------------------------------------------------------------------

st.subheader("Recent Logistics")

if not my_orders:
    st.caption("No orders yet")

for order in my_orders:
    with st.container(border=True):
        st.markdown(f"`{order.id}` **{order.type.value}** · {order.status.value}")
        st.caption(format_units(order.quantity_units, unit_label_for(order.type).value))

        if "confirm_receipt" in order_service.available_actions(order):
            received_by = st.text_input("Receiver's Name", key=f"recv_{order.id}", placeholder="e.g. Juan Dela Cruz")
            if st.button("Confirm Arrival", key=f"arrive_{order.id}"):
                confirmation_dialog(
                    {"Order": order.id, "Series": f"{order.series_start} - {order.series_end}",
                     "Received By": received_by},
                    lambda o=order, r=received_by: order_service.confirm_receipt(store, o.id, r),
                    f"Order {order.id} received",
                )

        if order.status == OrderStatus.RECEIVED and order.received_by:
            st.caption(f"Received by: {order.received_by}")
