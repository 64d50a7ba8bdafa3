import pandas as pd
import streamlit as st

from domain.models import ReceiptType, UserRole
from element_component import get_store, require_user, run_action, show_flash
from services import branch_service, inventory_service, order_service, warehouse_service
from utils.formatting import format_units

st.set_page_config(
    page_title="Warehouse & Logistics",
    page_icon="📦"
)

st.sidebar.header("📦 Warehouse & Logistics")

store = get_store()
require_user(UserRole.ADMIN)
show_flash()

# -----------------------------------------------------------------------------
# 1) Warehouse stock allocation
# -----------------------------------------------------------------------------
st.title("Warehouse Stock Allocation")

warehouse_search = st.text_input("Filter by branch...", key="warehouse_search")

for branch_id in list(store.warehouse.keys()):
    branch_name = inventory_service.branch_name_for(store, branch_id)
    if warehouse_search and warehouse_search.lower() not in branch_name.lower():
        continue

    with st.container(border=True):
        st.markdown(f"**{branch_name}**")
        for item in warehouse_service.get_items(store, branch_id):
            col_stock, col_start = st.columns(2)
            col_stock.metric(item.type.value, format_units(item.total_units, item.unit_label.value))
            col_start.metric(
                "Starts At",
                f"#{warehouse_service.next_series_start(store, branch_id, item.type):,}",
            )

with st.expander("Replenish warehouse directly"):
    with st.form("replenish_form"):
        branches = {b.id: b for b in branch_service.list_branches(store)}
        rep_branch = st.selectbox(
            "Branch",
            list(branches),
            format_func=lambda bid: branches[bid].branch_name or bid,
        )
        rep_type = st.selectbox("Receipt Type", list(ReceiptType), format_func=lambda t: t.value)
        rep_units = st.number_input("Units", min_value=1, step=1, value=1)

        if st.form_submit_button("Add Stock"):
            if run_action(
                lambda: warehouse_service.replenish(store, rep_branch, rep_type, int(rep_units)),
                "Warehouse replenished",
            ):
                st.rerun()

st.divider()

# -----------------------------------------------------------------------------
# 2) Active logistics requests
# -----------------------------------------------------------------------------
st.subheader("Logistics Requests")

active = order_service.active_orders(store)
if not active:
    st.caption("No active requests")

for order in active:
    with st.container(border=True):
        item = warehouse_service.find_item(store, order.branch_id, order.type)
        on_hand = item.total_units if item else 0

        col_info, col_action = st.columns([2, 1.5])
        with col_info:
            st.markdown(f"`{order.id}` **{order.branch_name}** · {order.type.value}")
            st.caption(
                f"{order.quantity_units} units requested {order.request_date} · "
                f"warehouse has {on_hand} · status **{order.status.value}**"
            )
            if order.series_start is not None:
                st.caption(f"Series {order.series_start} - {order.series_end}")

        actions = order_service.available_actions(order)
        with col_action:
            if "approve" in actions:
                if st.button("Approve", key=f"approve_{order.id}", type="primary"):
                    if run_action(lambda o=order: order_service.approve_order(store, o.id), f"{order.id} approved"):
                        st.rerun()

            if "ship" in actions:
                default_start = warehouse_service.next_series_start(store, order.branch_id, order.type)
                st.caption(f"Series starts at #{default_start:,}")
                if st.button("Ship", key=f"ship_{order.id}", type="primary"):
                    if run_action(
                        lambda o=order, s=default_start: order_service.ship_order(store, o.id, s),
                        f"{order.id} shipped",
                    ):
                        st.rerun()

            if "mark_delivered" in actions:
                if st.button("Mark Arrived", key=f"deliver_{order.id}"):
                    if run_action(lambda o=order: order_service.mark_delivered(store, o.id), f"{order.id} delivered"):
                        st.rerun()

            if "confirm_receipt" in actions:
                st.caption("Waiting for branch confirmation")

st.divider()

# -----------------------------------------------------------------------------
# 3) History
# -----------------------------------------------------------------------------
st.subheader("Logistics History")

history_search = st.text_input("Search history by branch or type", key="history_search")
history = order_service.order_history(store, history_search)

if history:
    df_history = pd.DataFrame(
        [
            {
                "Order": o.id,
                "Branch": o.branch_name,
                "Type": o.type.value,
                "Units": o.quantity_units,
                "Series": f"{o.series_start} - {o.series_end}",
                "Delivered": o.delivery_date,
                "Received By": o.received_by,
            }
            for o in history
        ]
    )
    st.dataframe(df_history, width='stretch', hide_index=True)
else:
    st.caption("No received orders")
