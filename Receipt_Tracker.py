import streamlit as st

from domain.errors import NotFoundError
from domain.models import UserRole
from element_component import current_user, get_store, show_flash
from services import branch_service, inventory_service, order_service, supplier_service
from services.reconciliation import remaining_series

st.set_page_config(
    page_title="Cashwrap Receipt Tracker",
    page_icon="🧾"
)

st.sidebar.header("🧾 Cashwrap Receipt Tracker")

store = get_store()
user = current_user()

if user is None:
    with st.form("login_form", enter_to_submit=True):
        st.subheader("Login")
        username = st.text_input("Username")

        if st.form_submit_button("Sign in"):
            try:
                st.session_state["user"] = branch_service.login(store, username)
                st.rerun()
            except NotFoundError as e:
                st.error(str(e))
    st.stop()

st.sidebar.write(f"Signed in as **{user.username}**")
if st.sidebar.button("Logout"):
    st.session_state.pop("user", None)
    st.rerun()

show_flash()

if user.role == UserRole.ADMIN:
    st.title("Admin Overview")

    col_1, col_2, col_3 = st.columns(3)
    col_1.metric("Active Requests", len(order_service.active_orders(store)))
    col_2.metric("Open Supplier Orders", len(supplier_service.open_orders(store)))
    col_3.metric("Low Stock Rows", len(inventory_service.low_stock_entries(store)))

    low = inventory_service.low_stock_entries(store)
    if low:
        st.subheader("Low Stock")
        for inv in low:
            start, end = remaining_series(inv)
            st.warning(
                f"{inventory_service.branch_name_for(store, inv.branch_id)} / {inv.type.value}: "
                f"{inv.remaining_stock:,} left (threshold {inv.threshold:,}), series {start}-{end}"
            )
    st.caption("Use the pages in the sidebar for warehouse, logistics, supplier and account work.")
else:
    st.title(f"Branch Portal: {user.branch_name}")
    st.caption("Open **Branch Portal** in the sidebar to log consumption or request stock.")
