import io

import pandas as pd
import pytest

from utils.csv_export import CSV_COLUMNS, collection_csv, collection_frame


@pytest.mark.parametrize("kind", sorted(CSV_COLUMNS))
def test_frame_has_fixed_columns(store, kind):
    frame = collection_frame(store, kind)
    assert list(frame.columns) == CSV_COLUMNS[kind]


def test_empty_collection_still_has_header(store):
    frame = collection_frame(store, "supplier_orders")
    assert frame.empty
    assert collection_csv(store, "supplier_orders").decode("utf-8").strip() == ",".join(
        CSV_COLUMNS["supplier_orders"]
    )


def test_inventory_csv(store):
    data = collection_csv(store, "inventory")

    frame = pd.read_csv(io.BytesIO(data))
    assert len(frame) == 4
    assert frame.loc[0, "type"] == "Sales Invoice"
    assert frame.loc[0, "remainingStock"] == 150
