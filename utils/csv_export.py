# cashwrap/utils/csv_export.py

from typing import Dict, List

import pandas as pd

from services.store import ReceiptStore
from services.sync_service import collection_records

# Fixed column set per entity kind, in output order.
CSV_COLUMNS: Dict[str, List[str]] = {
    "inventory": [
        "branchId", "company", "type", "currentSeriesStart", "currentSeriesEnd",
        "lastUsedNumber", "remainingStock", "threshold",
    ],
    "orders": [
        "id", "branchId", "branchName", "company", "type", "quantityUnits", "status",
        "requestDate", "deliveryDate", "seriesStart", "seriesEnd", "receivedBy",
    ],
    "warehouse": ["branchId", "type", "totalUnits", "receiptsPerUnit", "unitLabel"],
    "supplier_orders": [
        "id", "branchId", "type", "quantityUnits", "status", "requestDate",
        "billingInvoiceNo", "amount", "deliveryReceiptNo", "deliveryDate", "prfNumber", "isPaid",
    ],
    "users": ["id", "username", "role", "branchName", "company", "tinNumber"],
}


def collection_frame(store: ReceiptStore, kind: str) -> pd.DataFrame:
    columns = CSV_COLUMNS[kind]
    records = collection_records(store, kind)
    return pd.DataFrame(records, columns=columns)


def collection_csv(store: ReceiptStore, kind: str) -> bytes:
    """CSV bytes ready for st.download_button."""
    return collection_frame(store, kind).to_csv(index=False).encode("utf-8")
