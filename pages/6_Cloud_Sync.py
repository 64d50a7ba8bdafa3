import streamlit as st

from config import get_settings
from domain.errors import ValidationError
from domain.models import UserRole
from element_component import get_store, require_user
from services import sync_service
from utils.csv_export import CSV_COLUMNS, collection_csv

st.set_page_config(
    page_title="Cloud Sync & Export",
    page_icon="☁️"
)

st.sidebar.header("☁️ Cloud Sync & Export")

store = get_store()
require_user(UserRole.ADMIN)

st.title("Cloud Sync & Export")

# -------------------------------------------------------------------
# CSV export
# -------------------------------------------------------------------

st.subheader("CSV Export")

for kind in CSV_COLUMNS:
    st.download_button(
        f"Download {kind}.csv",
        data=collection_csv(store, kind),
        file_name=f"{kind}.csv",
        mime="text/csv",
        key=f"csv_{kind}",
    )

st.divider()

# -------------------------------------------------------------------
# Supabase
# -------------------------------------------------------------------

st.subheader("Supabase")

if not get_settings().sync_enabled:
    st.info("Cloud sync is off. Set SUPABASE_URL and SUPABASE_KEY to enable it.")
    st.stop()

if st.button("Export all collections", type="primary"):
    for table, (ok, msg, count) in sync_service.export_collections(store).items():
        if ok:
            st.success(f"{table}: {msg} ({count} rows)")
        else:
            st.error(f"{table}: {msg}")

st.caption("Import replaces the local collection with the remote rows. Empty tables are skipped.")

kind = st.selectbox("Collection", list(sync_service.COLLECTIONS))
if st.button("Import from cloud"):
    try:
        ok, msg, count = sync_service.import_collection(store, kind)
    except ValidationError as e:
        st.error(f"Remote data rejected: {e}")
    else:
        if ok:
            st.success(f"{kind}: {msg} ({count} rows)")
        else:
            st.error(f"{kind}: {msg}")
