import pandas as pd
import streamlit as st

from domain.models import ReceiptType, SupplierOrderStatus, UserRole
from element_component import confirmation_dialog, get_store, require_user, run_action, show_flash
from services import branch_service, inventory_service, supplier_service
from services.reconciliation import unit_label_for
from utils.formatting import format_peso

st.set_page_config(
    page_title="Supplier & Billing",
    page_icon="🚚"
)

st.sidebar.header("🚚 Supplier & Billing")

store = get_store()
require_user(UserRole.ADMIN)
show_flash()

# -------------------------------------------------------------------
# New procurement
# -------------------------------------------------------------------

st.title("Supplier Procurement")

with st.form("supplier_request_form"):
    branches = {b.id: b for b in branch_service.list_branches(store)}
    sup_branch = st.selectbox(
        "Branch",
        list(branches),
        index=None,
        placeholder="Select a branch",
        format_func=lambda bid: branches[bid].branch_name or bid,
    )
    sup_type = st.selectbox("Receipt Type", list(ReceiptType), format_func=lambda t: t.value)
    sup_units = st.number_input(f"Units ({unit_label_for(sup_type).value}s)", min_value=1, step=1, value=1)

    if st.form_submit_button("New Procurement"):
        if sup_branch is None:
            st.error("Please select a branch.")
        elif run_action(
            lambda: supplier_service.request_from_supplier(store, sup_branch, sup_type, int(sup_units)),
            "Procurement requested",
        ):
            st.rerun()

# -------------------------------------------------------------------
# Open supplier orders
# -------------------------------------------------------------------

st.subheader("Open Orders")

open_orders = supplier_service.open_orders(store)
if not open_orders:
    st.caption("No open supplier orders")

for o in open_orders:
    branch_name = inventory_service.branch_name_for(store, o.branch_id)
    with st.container(border=True):
        st.markdown(f"`{o.id}` **{branch_name}** · {o.type.value} · {o.quantity_units} units · {o.status.value}")
        st.caption(f"Requested {o.request_date}")

        col_1, col_2 = st.columns(2)
        if o.status == SupplierOrderStatus.REQUESTED:
            if col_1.button("Mark Processed", key=f"proc_{o.id}"):
                if run_action(
                    lambda oid=o.id: supplier_service.update_supplier_status(store, oid, SupplierOrderStatus.PROCESSED)
                ):
                    st.rerun()
        if o.status in (SupplierOrderStatus.REQUESTED, SupplierOrderStatus.PROCESSED):
            if col_2.button("Mark Shipped", key=f"ship_{o.id}"):
                if run_action(
                    lambda oid=o.id: supplier_service.update_supplier_status(store, oid, SupplierOrderStatus.SHIPPED)
                ):
                    st.rerun()

        with st.expander("Confirm Delivery"):
            with st.form(f"deliver_form_{o.id}"):
                invoice_no = st.text_input("Billing Invoice No.")
                amount = st.number_input("Amount", min_value=0.0, step=100.0)
                dr_no = st.text_input("Delivery Receipt No.")
                del_date = st.date_input("Delivery Date")

                submitted_delivery = st.form_submit_button("Confirm Delivery")

            # dialogs cannot open inside a form
            if submitted_delivery:
                confirmation_dialog(
                    {"Order": o.id, "Branch": branch_name, "Invoice": invoice_no,
                     "Amount": format_peso(amount), "DR": dr_no, "Date": del_date.isoformat()},
                    lambda oid=o.id, inv=invoice_no, amt=amount, dr=dr_no, d=del_date.isoformat():
                        supplier_service.confirm_supplier_delivery(store, oid, inv, amt, dr, d),
                    f"{o.id} delivered to warehouse",
                )

st.divider()

# -------------------------------------------------------------------
# Billing archive
# -------------------------------------------------------------------

st.subheader("Billing Archive")

billing_search = st.text_input("Search by invoice or PRF...")
records = supplier_service.billing_records(store, billing_search)
totals = supplier_service.billing_totals(records)

col_paid, col_out, col_count = st.columns(3)
col_paid.metric("Total Paid", format_peso(totals.paid))
col_out.metric("Outstanding", format_peso(totals.outstanding))
col_count.metric("Active Invoices", totals.invoice_count)

if records:
    df_billing = pd.DataFrame(
        [
            {
                "Invoice": o.billing_invoice_no,
                "PRF": o.prf_number or "Waiting for PRF",
                "Branch": inventory_service.branch_name_for(store, o.branch_id),
                "Amount": format_peso(o.amount),
                "Status": "Paid" if o.is_paid else "Unpaid",
                "Delivered": o.delivery_date,
            }
            for o in records
        ]
    )
    st.dataframe(df_billing, width='stretch', hide_index=True)

for o in records:
    if o.prf_number and o.is_paid:
        continue
    with st.container(border=True):
        st.markdown(f"`{o.id}` invoice **{o.billing_invoice_no}**")
        if not o.prf_number:
            prf = st.text_input("PRF Number", key=f"prf_{o.id}", placeholder="PRF-2023-XXXX")
            if st.button("Add PRF", key=f"prf_btn_{o.id}"):
                if run_action(lambda oid=o.id, p=prf: supplier_service.attach_prf_number(store, oid, p), "PRF saved"):
                    st.rerun()
        elif not o.is_paid:
            if st.button("Confirm Payment", key=f"pay_{o.id}"):
                if run_action(lambda oid=o.id: supplier_service.set_paid(store, oid, True), "Payment confirmed"):
                    st.rerun()
