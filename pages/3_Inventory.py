import pandas as pd
import streamlit as st

from domain.models import UserRole
from element_component import get_store, require_user
from services import inventory_service
from services.reconciliation import is_low_stock
from utils.csv_export import collection_csv

st.set_page_config(
    page_title="Branch Inventory",
    page_icon="🧾"
)

st.sidebar.header("🧾 Branch Inventory")

store = get_store()
require_user(UserRole.ADMIN)

st.title("Branch Inventory")

query = st.text_input("Search by branch, company or receipt type")
rows = inventory_service.search_inventory(store, query)

if not rows:
    st.warning("No inventory rows match.")
    st.stop()

df_inventory = pd.DataFrame(
    [
        {
            "Branch": inventory_service.branch_name_for(store, inv.branch_id),
            "Company": inv.company,
            "Type": inv.type.value,
            "Series": f"{inv.current_series_start} - {inv.current_series_end}",
            "Last Used": inv.last_used_number,
            "Remaining": inv.remaining_stock,
            "Threshold": inv.threshold,
            "Status": "LOW" if is_low_stock(inv) else "OK",
            "Updated": inv.last_update_date or "-",
            "By": inv.last_updated_by or "-",
        }
        for inv in rows
    ]
)

st.dataframe(df_inventory, width='stretch', hide_index=True)

st.download_button(
    "Download as CSV",
    data=collection_csv(store, "inventory"),
    file_name="inventory.csv",
    mime="text/csv",
)
