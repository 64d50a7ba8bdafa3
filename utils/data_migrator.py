import logging
from typing import Dict, Iterable, List

from dotenv import load_dotenv

BATCH_SIZE = 500

logger = logging.getLogger(__name__)


def chunked(items: List[Dict], size: int) -> Iterable[List[Dict]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


def dedupe_rows(rows: List[Dict], key_cols: List[str]) -> List[Dict]:
    """
    Deduplicate rows in-memory using key_cols.
    Keeps the last occurrence, so a later row wins like an upsert would.
    Rows missing any key value are skipped.
    """
    by_key: Dict[tuple, Dict] = {}

    for r in rows:
        key = tuple(r.get(c) for c in key_cols)
        if any(k is None or k == "" for k in key):
            logger.warning("Skipping row without %s: %s", key_cols, r)
            continue
        by_key[key] = r

    return list(by_key.values())


if __name__ == "__main__":
    # Push the demo data set to the configured Supabase schema.
    load_dotenv()

    from config import configure_logging
    from services.store import ReceiptStore
    from services.sync_service import export_collections

    configure_logging()
    for table, (ok, msg, count) in export_collections(ReceiptStore.seeded()).items():
        print(f"{table}: {msg} ({count} rows)" if ok else f"{table}: FAILED {msg}")
