import streamlit as st

from domain.models import UserRole
from element_component import confirmation_dialog, get_store, require_user, run_action, show_flash
from services import branch_service

st.set_page_config(
    page_title="Branch Accounts",
    page_icon="👥"
)

st.sidebar.header("👥 Branch Accounts")

store = get_store()
require_user(UserRole.ADMIN)
show_flash()

st.title("Branch Accounts")

with st.form("add_branch_form", enter_to_submit=False):
    st.subheader("Add Branch")
    new_branch_name = st.text_input("Branch Name")
    new_company = st.text_input("Company")
    new_username = st.text_input("Username")
    new_tin = st.text_input("TIN Number")

    if st.form_submit_button("Submit"):
        if run_action(
            lambda: branch_service.add_branch(store, new_branch_name, new_company, new_username, new_tin),
            f"Branch {new_branch_name} created",
        ):
            st.rerun()

st.subheader("Accounts")
accounts_search = st.text_input("Search by branch, company or username")

for u in branch_service.list_branches(store, accounts_search):
    with st.expander(f"{u.branch_name} · {u.company} · {u.username}"):
        with st.form(f"edit_branch_{u.id}"):
            branch_name = st.text_input("Branch Name", value=u.branch_name or "")
            company = st.text_input("Company", value=u.company or "")
            username = st.text_input("Username", value=u.username)
            tin = st.text_input("TIN Number", value=u.tin_number or "")

            if st.form_submit_button("Save"):
                if run_action(
                    lambda uid=u.id: branch_service.update_branch(
                        store, uid, branch_name=branch_name, company=company,
                        username=username, tin_number=tin or None,
                    ),
                    "Account updated",
                ):
                    st.rerun()

        if st.button("Delete Branch", key=f"delete_{u.id}"):
            confirmation_dialog(
                {"Branch": u.branch_name, "Username": u.username,
                 "Note": "Inventory, warehouse stock and orders of this branch are removed too"},
                lambda uid=u.id: branch_service.delete_branch(store, uid),
                f"Branch {u.branch_name} deleted",
            )
