import logging
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client, create_client

from config import get_settings
from utils.data_migrator import BATCH_SIZE, chunked, dedupe_rows

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_client() -> Client:
    """
    Lazily build the Supabase client from SUPABASE_URL / SUPABASE_KEY.
    """
    global _client
    if _client is None:
        settings = get_settings()
        if not settings.sync_enabled:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY are not set in the environment")
        _client = create_client(settings.supabase_url, settings.supabase_key)
    return _client


def _table(table_name: str):
    return get_client().schema(get_settings().schema).table(table_name)


def fetch_table(table_name: str) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Fetch every row of a remote table.
    Returns (ok, message, rows)
    """
    try:
        resp = _table(table_name).select("*").execute()

        if getattr(resp, "error", None):
            logger.warning("Fetch %s failed: %s", table_name, resp.error)
            return False, f"Fetch failed: {resp.error}", []

        if not resp.data:
            return True, "No rows found", []

        return True, "Fetched", list(resp.data)

    except Exception as e:
        logger.warning("Fetch %s failed: %s", table_name, e)
        return False, f"Unexpected error: {e}", []


def upsert_rows(
        table_name: str,
        rows: List[Dict[str, Any]],
        conflict_cols: List[str],
        batch_size: int = BATCH_SIZE,
) -> Tuple[bool, str, int]:
    """
    Upsert rows in batches, keyed on conflict_cols.
    Returns (ok, message, rows_written)
    """
    deduped = dedupe_rows(rows, conflict_cols)
    if not deduped:
        return True, "Nothing to upsert", 0

    total = 0
    try:
        for batch in chunked(deduped, batch_size):
            resp = (
                _table(table_name)
                .upsert(batch, on_conflict=",".join(conflict_cols))
                .execute()
            )

            if getattr(resp, "error", None):
                logger.warning("Upsert %s failed after %d rows: %s", table_name, total, resp.error)
                return False, f"Upsert failed: {resp.error}", total

            total += len(batch)
            logger.info("Upserted %d rows into %s (running total: %d)", len(batch), table_name, total)

        return True, "Upserted", total

    except Exception as e:
        logger.warning("Upsert %s failed after %d rows: %s", table_name, total, e)
        return False, str(e), total
