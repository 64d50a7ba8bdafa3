import logging
from typing import Any, Callable, Dict, Optional

import pandas as pd
import streamlit as st

from config import configure_logging, get_settings
from domain.errors import ReceiptTrackerError
from domain.models import User, UserRole
from services.store import ReceiptStore

logger = logging.getLogger(__name__)


def get_store() -> ReceiptStore:
    """One store per browser session, seeded on first use."""
    if "store" not in st.session_state:
        configure_logging()
        settings = get_settings()
        st.session_state["store"] = ReceiptStore.seeded() if settings.seed_demo_data else ReceiptStore()
    return st.session_state["store"]


def current_user() -> Optional[User]:
    return st.session_state.get("user")


def require_user(role: Optional[UserRole] = None) -> User:
    """Stop the page unless someone (with `role`, if given) is logged in."""
    user = current_user()
    if user is None:
        st.warning("Please log in from the main page first.")
        st.stop()
    if role is not None and user.role != role:
        st.error("This page is not available for your account.")
        st.stop()
    return user


def run_action(action: Callable[[], Any], success_msg: Optional[str] = None) -> bool:
    """
    Run a store operation and show its outcome. Rejected operations
    are shown as a blocking message; nothing was changed.
    """
    try:
        action()
    except ReceiptTrackerError as e:
        st.error(str(e))
        return False

    if success_msg:
        st.session_state["flash"] = success_msg
    return True


def show_flash() -> None:
    msg = st.session_state.pop("flash", None)
    if msg:
        st.success(msg)


@st.dialog("Confirm")
def confirmation_dialog(value: Dict[str, Any], action: Callable[[], Any], success_msg: str):
    df = pd.DataFrame(list(value.items()), columns=["Key", "Value"])
    df["Value"] = df["Value"].astype("string")
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Confirm", type="primary", key="confirm_yes"):
            if run_action(action, success_msg):
                st.rerun()
    with col_no:
        if st.button("Cancel"):
            st.rerun()
